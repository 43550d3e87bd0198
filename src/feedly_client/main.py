"""Application wiring used by the command line tool."""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from .client import FeedlyClient
from .config import AppConfig, load_config, save_config
from .errors import FeedlyError
from .models import TokenResult
from .utils.paths import get_config_file_path


class FeedlyApp:
    """Loads configuration, sets up logging and owns the API client."""

    def __init__(self, config_file: Optional[Path] = None, verbose: bool = False):
        """
        Initialize the application.

        Args:
            config_file: Optional path to configuration file
            verbose: Force DEBUG logging regardless of the configured level
        """
        self.config_file = config_file or get_config_file_path()
        self.config: AppConfig = load_config(self.config_file)

        self._setup_logging(verbose)

        self.client = FeedlyClient(self.config.client)
        logging.debug(f"Feedly client ready for {self.client.service_host}")

    def _setup_logging(self, verbose: bool) -> None:
        """Setup logging configuration."""
        log_level = logging.DEBUG if verbose else getattr(logging, self.config.log_level, logging.INFO)

        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

        console_handler = logging.StreamHandler()
        console_handler.setLevel(log_level)
        console_handler.setFormatter(formatter)

        root_logger = logging.getLogger()
        root_logger.setLevel(log_level)
        root_logger.handlers = []
        root_logger.addHandler(console_handler)

        if self.config.log_file:
            log_file = Path(self.config.log_file)
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file)
            file_handler.setLevel(log_level)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)

    def resolve_token(self, token: Optional[str]) -> str:
        """Return ``token`` or the one stored in the config file."""
        resolved = token or self.config.client.token
        if not resolved:
            raise FeedlyError("No access token given and none stored in config (run 'feedly-client token' first)")
        return resolved

    def store_token(self, result: TokenResult) -> None:
        """
        Persist the access token from a token exchange into the config file.

        Raises:
            FeedlyError: If the result carries no access token
        """
        if not result.access_token:
            raise FeedlyError("Token response has no access_token, nothing to store")

        client_config = self.config.client.model_copy(update={"token": result.access_token})
        self.config = self.config.model_copy(update={"client": client_config})
        save_config(self.config, self.config_file)
        logging.info(f"Stored access token in {self.config_file}")

    def get_info(self) -> Dict[str, Any]:
        """
        Get application information.

        Returns:
            Dictionary with application info
        """
        from . import __version__

        return {
            "version": __version__,
            "config_file": str(self.config_file),
            "service_host": self.client.service_host,
            "client_id": self.config.client.client_id,
            "sandbox": self.config.client.sandbox,
            "token_stored": bool(self.config.client.token),
            "additional_headers": sorted(self.config.client.additional_headers),
            "log_level": self.config.log_level,
            "log_file": self.config.log_file,
        }
