from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from igreja.config import settings
from igreja.models.base import Base
# Import all model classes so their tables are part of Base.metadata
from igreja.models.attendance_session import AttendanceSession  # noqa: F401
from igreja.models.auth_credential import AuthCredential, RevokedToken  # noqa: F401
from igreja.models.church import Church  # noqa: F401
from igreja.models.financial_transaction import FinancialTransaction  # noqa: F401
from igreja.models.member import Member  # noqa: F401
from igreja.models.profile import Profile  # noqa: F401
from igreja.models.role_permission import RolePermission  # noqa: F401
from igreja.models.room import Room  # noqa: F401
from igreja.models.visitor import Visitor  # noqa: F401

config = context.config
config.set_main_option("sqlalchemy.url", settings.DATABASE_URL)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            render_as_batch=connection.dialect.name == "sqlite",
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
