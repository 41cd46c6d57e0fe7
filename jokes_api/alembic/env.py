import os
from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool
from dotenv import load_dotenv


# 환경 변수 로딩
ENV_PATH = os.path.join(os.path.dirname(__file__), '..', 'config', 'settings.env')


def load_environment(env_path: str = ENV_PATH) -> None:
    """
    settings.env 파일이 있으면 읽어 환경 변수를 설정
    """
    if os.path.exists(env_path):
        load_dotenv(env_path, override=False)


def build_database_url() -> str:
    """
    DATABASE_URL 환경 변수를 우선 사용하고, 없으면 개별 변수로 MySQL URL을 생성
    비동기 드라이버 URL은 동기 드라이버로 교체하여 사용
    """
    db_url = os.getenv('DATABASE_URL')
    if db_url:
        return _convert_async_to_sync(db_url)

    user = os.getenv('DB_USER')
    host = os.getenv('DB_HOST')
    name = os.getenv('DB_NAME')
    if not (user and host and name):
        # 앱 설정과 동일하게 로컬 sqlite 파일로 대체
        root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', '..'))
        return f"sqlite:///{os.path.join(root, 'jokes.db')}"

    pw = os.environ.get('DB_PASSWORD', '')
    port = os.environ.get('DB_PORT', '3306')
    async_url = f"mysql+asyncmy://{user}:{pw}@{host}:{port}/{name}"
    return _convert_async_to_sync(async_url)


def _convert_async_to_sync(url: str) -> str:
    """
    asyncmy → pymysql, aiosqlite → pysqlite 로 동기 커넥터 URL 변환
    """
    for async_prefix, sync_prefix in (
        ('mysql+asyncmy://', 'mysql+pymysql://'),
        ('sqlite+aiosqlite://', 'sqlite://'),
    ):
        if url.startswith(async_prefix):
            return url.replace(async_prefix, sync_prefix, 1)
    return url


# .env 로드
load_environment()

# 알렘빅 설정 객체 가져오기
alembic_cfg = context.config
if alembic_cfg.config_file_name:
    fileConfig(alembic_cfg.config_file_name)

# SQLAlchemy URL 설정
database_url = build_database_url()
alembic_cfg.set_main_option('sqlalchemy.url', database_url)

# 메타데이터 바인딩
from jokes_api.core.database import Base  # noqa: E402
import jokes_api.models.user  # noqa: E402
import jokes_api.models.joke  # noqa: E402

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """
    오프라인 모드에서 SQL 스크립트를 생성
    """
    url = alembic_cfg.get_main_option('sqlalchemy.url')
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={'paramstyle': 'named'},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """
    온라인 모드에서 데이터베이스에 직접 연결하여 마이그레이션을 실행
    """
    connectable = engine_from_config(
        alembic_cfg.get_section(alembic_cfg.config_ini_section),
        prefix='sqlalchemy.',
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)
        with context.begin_transaction():
            context.run_migrations()


# 엔트리포인트
if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
