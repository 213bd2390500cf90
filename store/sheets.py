"""
Google Sheets record store client

Thin async wrapper around the Sheets v4 values API. Three operations are
exposed: read a range, append a row, overwrite a range. Nothing is cached
and nothing is retried; the first failure is wrapped in StoreError and
propagated to the caller.

The google-api-python-client is blocking, so each call runs in a worker
thread. httplib2 transports are not thread-safe, so every call executes on
its own freshly authorized Http object.
"""

import asyncio
import json
import os
from typing import Any, Callable, List, Optional

import httplib2
from google.auth.exceptions import GoogleAuthError
from google.oauth2 import service_account
from google_auth_httplib2 import AuthorizedHttp
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from config import get_logger
from exceptions import ConfigurationError, StoreError

logger = get_logger(__name__).bind(component="store")

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]

# Values are written exactly as given (no formula or date parsing by Sheets)
VALUE_INPUT_OPTION = "RAW"


def load_credentials(config) -> service_account.Credentials:
    """Load service account credentials from env JSON or the credentials file

    Raises:
        ConfigurationError: No credentials available
        StoreError: Credentials present but unusable
    """
    try:
        if config.GOOGLE_CREDENTIALS:
            logger.info("using credentials from environment variable")
            info = json.loads(config.GOOGLE_CREDENTIALS)
            return service_account.Credentials.from_service_account_info(info, scopes=SCOPES)

        if not os.path.exists(config.GOOGLE_CREDENTIALS_FILE):
            raise ConfigurationError(
                "No Google service account credentials configured",
                config_key="GOOGLE_CREDENTIALS",
            )

        logger.info("using credentials from file", path=config.GOOGLE_CREDENTIALS_FILE)
        return service_account.Credentials.from_service_account_file(
            config.GOOGLE_CREDENTIALS_FILE, scopes=SCOPES
        )
    except (ValueError, OSError, GoogleAuthError) as e:
        logger.error("failed to load sheets credentials", error=str(e))
        raise StoreError(
            "Failed to authenticate with Google Sheets", operation="auth", original_error=e
        ) from e


class SheetsClient:
    """Record store adapter over one spreadsheet

    Usage:
        client = SheetsClient.from_config(config)
        rows = await client.fetch_rows("Votes", "A1:J")
        await client.append_row("Votes", ["10/19/2026", "Jane Cruz", ...])
        await client.update_cells("Contestants", "D4", ["FALSE"])
    """

    def __init__(
        self,
        spreadsheet_id: str,
        service: Any,
        http_factory: Optional[Callable[[], Any]] = None,
    ):
        """
        Args:
            spreadsheet_id: Target spreadsheet
            service: googleapiclient Resource for sheets v4
            http_factory: Returns a fresh authorized transport per call
                (None executes on the service's own transport)
        """
        self.spreadsheet_id = spreadsheet_id
        self.service = service
        self._http_factory = http_factory

    @classmethod
    def from_config(cls, config) -> "SheetsClient":
        """Build a client from service account credentials in config"""
        if not config.SHEET_ID:
            raise ConfigurationError("Spreadsheet id not configured", config_key="VOTING_SHEET_ID")

        credentials = load_credentials(config)
        service = build("sheets", "v4", credentials=credentials, cache_discovery=False)

        def http_factory():
            return AuthorizedHttp(credentials, http=httplib2.Http())

        logger.info("sheets client ready", spreadsheet_configured=True)
        return cls(config.SHEET_ID, service, http_factory=http_factory)

    def _values(self):
        return self.service.spreadsheets().values()

    def _execute(self, request) -> Any:
        if self._http_factory is None:
            return request.execute()
        return request.execute(http=self._http_factory())

    async def _call(self, table: str, operation: str, build_request: Callable[[], Any]) -> Any:
        """Run one blocking API call in a thread, wrapping every failure in StoreError"""

        def run():
            return self._execute(build_request())

        try:
            return await asyncio.to_thread(run)
        except HttpError as e:
            status = getattr(e.resp, "status", None)
            logger.error("sheets api error", table=table, operation=operation, status=status)
            raise StoreError(
                f"Sheets API {operation} failed", table=table, operation=operation, original_error=e
            ) from e
        except GoogleAuthError as e:
            logger.error("sheets authentication failed", table=table, operation=operation)
            raise StoreError(
                "Failed to authenticate with Google Sheets",
                table=table,
                operation=operation,
                original_error=e,
            ) from e
        except (OSError, httplib2.HttpLib2Error) as e:
            logger.error("sheets transport error", table=table, operation=operation, error=str(e))
            raise StoreError(
                f"Sheets {operation} failed", table=table, operation=operation, original_error=e
            ) from e

    async def fetch_rows(self, table: str, cell_range: str) -> List[List[Any]]:
        """Read a range, returning rows in sheet order (trailing empty cells omitted by the API)"""
        a1 = f"{table}!{cell_range}"
        response = await self._call(
            table,
            "read",
            lambda: self._values().get(spreadsheetId=self.spreadsheet_id, range=a1),
        )
        return response.get("values", []) if response else []

    async def append_row(self, table: str, row: List[Any], cell_range: str = "A:A") -> None:
        """Append one row after the last non-empty row of the table"""
        a1 = f"{table}!{cell_range}"
        await self._call(
            table,
            "append",
            lambda: self._values().append(
                spreadsheetId=self.spreadsheet_id,
                range=a1,
                valueInputOption=VALUE_INPUT_OPTION,
                body={"values": [row]},
            ),
        )

    async def update_cells(self, table: str, address: str, values: List[Any]) -> None:
        """Overwrite one cell or one row segment starting at address"""
        a1 = f"{table}!{address}"
        await self._call(
            table,
            "update",
            lambda: self._values().update(
                spreadsheetId=self.spreadsheet_id,
                range=a1,
                valueInputOption=VALUE_INPUT_OPTION,
                body={"values": [values]},
            ),
        )

    def close(self) -> None:
        """Release the discovery service's transport"""
        close = getattr(self.service, "close", None)
        if close:
            close()
