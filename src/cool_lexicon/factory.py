"""Build ready-to-use lexicon instances from configuration."""

from __future__ import annotations

import logging

from cool_lexicon import db as _db
from cool_lexicon import migrations as _migrations
from cool_lexicon.config import LexiconConfig
from cool_lexicon.exceptions import ConfigError, LexiconError
from cool_lexicon.lexicon import SQLLexicon
from cool_lexicon.models import BackendType

logger = logging.getLogger(__name__)


def get_instance(
    config: LexiconConfig | None,
    *,
    setup_check: bool = False,
) -> SQLLexicon:
    """Return a lexicon connected to the store described by ``config``.

    With ``setup_check`` the target database and schema are created or
    migrated first. That is needed on a first run only; on later runs it
    is a harmless no-op.

    Raises:
        ConfigError: ``config`` is missing.
        ConnectionFailureError: the backend cannot be reached.
        MigrationError: the schema cannot be set up or is too new.
    """
    if config is None:
        raise ConfigError("config is nil")

    target = _db.describe_target(config)

    if setup_check and config.type is BackendType.MYSQL:
        logger.info("Connecting to MySQL @ %s:%s", config.host, config.effective_port)
        server = _db.connect(config, select_database=False)
        try:
            _migrations.ensure_database(server, config.database)
        finally:
            server.conn.close()

    backend = _db.connect(config)
    logger.info("Connected to %s @ %s", config.type.value, target)

    try:
        if setup_check:
            _migrations.migrate(backend)
            logger.info("All checks completed")
        else:
            _migrations.check_schema_version(backend)
    except LexiconError:
        backend.conn.close()
        raise

    return SQLLexicon.from_backend(backend)
