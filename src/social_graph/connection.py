import atexit
import threading
from contextlib import contextmanager
from typing import Iterator, Optional

from loguru import logger
from neo4j import Driver, GraphDatabase, Session, basic_auth
from neo4j.exceptions import AuthError, DriverError, ServiceUnavailable

from .config import Neo4jSettingsModel, load_runtime_settings
from .exceptions import GraphConnectionError
from .logging_config import redact_uri, redact_username


def is_encryption_enabled(setting: Optional[str]) -> bool:
    """
    Parse the encryption toggle.

    Encryption is on when the setting is present, non-empty and not the
    literal string ``"false"``. Anything else (including ``"False"``) turns
    it on; a missing or empty setting turns it off.
    """
    return bool(setting) and setting != "false"


def create_driver(
    uri: str,
    username: str,
    password: str,
    encrypted_setting: Optional[str] = None,
) -> Driver:
    """
    Build an authenticated Neo4j driver.

    The driver connects lazily: an unreachable endpoint or bad credentials
    only surface on first use. Neo4j integers come back as plain ``int``.
    """
    encrypted = is_encryption_enabled(encrypted_setting)
    logger.info(
        f"Initializing Neo4j driver for URI: {redact_uri(uri)} "
        f"(user={redact_username(username)}, encrypted={encrypted})"
    )
    # +s/+ssc schemes reject an explicit encrypted flag
    if "+s" in uri.split("://", 1)[0]:
        return GraphDatabase.driver(uri, auth=basic_auth(username, password))
    return GraphDatabase.driver(
        uri, auth=basic_auth(username, password), encrypted=encrypted
    )


def verify_connectivity(driver: Driver) -> None:
    """Eagerly check that ``driver`` can reach and authenticate to the store."""
    try:
        driver.verify_connectivity()
    except (ServiceUnavailable, AuthError, DriverError) as e:
        logger.error(f"Neo4j connectivity check failed: {e}")
        raise GraphConnectionError(str(e)) from e
    logger.info("Neo4j connectivity verified.")


class DriverManager:
    """Thread-safe owner of the process-wide Neo4j driver."""

    def __init__(self) -> None:
        self._driver: Optional[Driver] = None
        self._settings: Optional[Neo4jSettingsModel] = None
        self._lock = threading.Lock()

    @property
    def initialized(self) -> bool:
        return self._driver is not None

    @property
    def settings(self) -> Optional[Neo4jSettingsModel]:
        return self._settings

    def initialize(self, settings: Optional[Neo4jSettingsModel] = None) -> Driver:
        """
        Create the driver from ``settings``.

        With no argument the settings come from ``config/settings.yaml``
        overlaid with ``NEO4J_*`` environment variables. Calling it again
        while a driver is open returns that driver unchanged.
        """
        with self._lock:
            if self._driver is not None:
                logger.debug("Neo4j driver already initialized.")
                return self._driver
            settings = settings or load_runtime_settings().neo4j
            self._driver = create_driver(
                settings.uri, settings.user, settings.password, settings.encrypted
            )
            self._settings = settings
            return self._driver

    def get_driver(self) -> Driver:
        with self._lock:
            if self._driver is None:
                raise GraphConnectionError(
                    "Neo4j driver is not initialized; call init_driver() first."
                )
            return self._driver

    def close(self) -> None:
        with self._lock:
            if self._driver is not None:
                logger.info("Closing Neo4j driver.")
                self._driver.close()
                self._driver = None
                self._settings = None


driver_manager = DriverManager()
atexit.register(driver_manager.close)


def init_driver(settings: Optional[Neo4jSettingsModel] = None) -> Driver:
    """Initialize the process-wide driver."""
    return driver_manager.initialize(settings)


def get_driver() -> Driver:
    """Return the process-wide driver; raise if ``init_driver`` was not called."""
    return driver_manager.get_driver()


def close_driver() -> None:
    """Close the process-wide driver if it is open."""
    driver_manager.close()


@contextmanager
def session(database: Optional[str] = None) -> Iterator[Session]:
    """Yield an auto-commit session on the process-wide driver."""
    driver = get_driver()
    settings = driver_manager.settings
    db_name = database or (settings.database if settings else None)
    with driver.session(database=db_name) as neo4j_session:
        yield neo4j_session
