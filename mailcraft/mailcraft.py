import logging

from mailcraft.admin.fake_login import create_fake_login_blueprint
from mailcraft.attachment.blueprint import create_attachment_blueprint
from mailcraft.attachment.core import AttachmentAttacher
from mailcraft.config import Config
from mailcraft.db.db import DB
from mailcraft.db.db_loader import get_db
from mailcraft.engine import Engine
from mailcraft.telemetry import setup_telemetry

logger = logging.getLogger(__name__)


def create_engine(config: Config, db: DB) -> Engine:
    """Create the engine and register the editor actions on it."""
    app = Engine(config, db, __name__)

    attacher = AttachmentAttacher(db, total_size_limit=config.attachments.total_size_in_bytes)
    app.register_blueprint(create_attachment_blueprint(attacher))

    if config.fake_login:
        app.register_blueprint(create_fake_login_blueprint())

    return app


def create_app_from_config(config: Config) -> Engine:
    engine = create_engine(config, get_db(config.db))
    if setup_telemetry(engine, config.telemetry) is not None:
        engine.telemetry_instrumented = True
    logger.info("Created %s with %s database", config.app_name, engine.db.db_name)
    return engine


def create_app(config_path: str) -> Engine:
    config = Config.parse_yaml(config_path)
    return create_app_from_config(config)
