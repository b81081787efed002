from contextlib import contextmanager
from typing import Any, Dict, Generator, Optional

import requests

from finance_tracker.config.settings import ConfigLoader
from finance_tracker.domain.enums import TransactionKind

DELETE_STYLES = ("query", "path")

class ApiConfig:
    """Remote collection (SheetDB) configuration settings."""

    def __init__(
        self,
        base_url: str,
        income_sheet: str = "Receitas",
        expense_sheet: str = "Despesas",
        delete_style: str = "query",
        timeout: float = 10,
        schema: str = "month",
        currency_symbol: str = "R$",
    ):
        if delete_style not in DELETE_STYLES:
            raise ValueError(
                f"Unknown delete style '{delete_style}'. "
                f"Expected one of: {', '.join(DELETE_STYLES)}"
            )
        self.base_url = base_url.rstrip("/")
        self.sheets = {
            TransactionKind.INCOME: income_sheet,
            TransactionKind.EXPENSE: expense_sheet,
        }
        self.delete_style = delete_style
        self.timeout = float(timeout)
        self.schema = schema
        self.currency_symbol = currency_symbol

    @classmethod
    def from_config(cls, config: Optional[Dict[str, Any]] = None) -> "ApiConfig":
        """
        Build the settings from a config dict.

        Args:
            config: Optional config dict. If None, loads from ConfigLoader.
        """
        if config is None:
            config = ConfigLoader.load_sheetdb_config()

        sheets = config.get("sheets", {})
        return cls(
            base_url=config["base_url"],
            income_sheet=sheets.get("income", "Receitas"),
            expense_sheet=sheets.get("expense", "Despesas"),
            delete_style=config.get("delete_style", "query"),
            timeout=config.get("timeout", 10),
            schema=config.get("schema", "month"),
            currency_symbol=config.get("currency_symbol", "R$"),
        )

    def sheet_for(self, kind: TransactionKind) -> str:
        """Name of the sheet holding a kind of transaction"""
        return self.sheets[kind]

    def collection_url(self, kind: TransactionKind) -> str:
        return f"{self.base_url}?sheet={self.sheet_for(kind)}"

    def record_address(self, kind: TransactionKind, transaction_id: str) -> tuple[str, Dict[str, str]]:
        """
        URL and query parameters addressing a single record.

        Query style:  <base>?sheet=X&column=id&value=<id>
        Path style:   <base>/id/<id>?sheet=X
        """
        sheet = self.sheet_for(kind)
        if self.delete_style == "path":
            return f"{self.base_url}/id/{transaction_id}", {"sheet": sheet}
        return self.base_url, {"sheet": sheet, "column": "id", "value": transaction_id}


class SessionManager:
    """
    Manages the HTTP session used to talk to the remote collections.

    Uses context managers for safe session handling.
    """

    def __init__(self, config: ApiConfig):
        self.config = config
        self._session: Optional[requests.Session] = None

    def get_session(self) -> requests.Session:
        """
        Get or create an HTTP session.

        Returns:
            requests.Session: Session with JSON headers
        """
        if self._session is None:
            self._session = self._create_session()
        return self._session

    def _create_session(self) -> requests.Session:
        session = requests.Session()
        session.headers.update({
            "Content-Type": "application/json",
            "Accept": "application/json",
        })
        return session

    def close(self) -> None:
        """Close the session if open."""
        if self._session:
            self._session.close()
            self._session = None

    @contextmanager
    def request(self, method: str, url: str, **kwargs) -> Generator[requests.Response, None, None]:
        """
        Context manager around a single request.

        Applies the configured timeout and releases the connection when
        the block finishes.

        Usage:
            with session_manager.request("GET", url) as response:
                response.json()
        """
        kwargs.setdefault("timeout", self.config.timeout)
        response = self.get_session().request(method, url, **kwargs)
        try:
            yield response
        finally:
            response.close()

    def __enter__(self) -> "SessionManager":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit - close session."""
        self.close()
