# pyright: reportUnknownMemberType=false, reportUnknownVariableType=false, reportMissingTypeStubs=false
"""
Google Drive service: the hierarchical file store.

Patient documents live in one folder per patient, under a single root folder
found (or created) by name.
"""

import logging
from dataclasses import dataclass
from typing import Any, List, Optional

from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from core.exceptions import ExternalServiceError
from utils.google_errors import http_error_message, http_error_status

logger = logging.getLogger(__name__)

FOLDER_MIME_TYPE = 'application/vnd.google-apps.folder'
FOLDER_URL_TEMPLATE = 'https://drive.google.com/drive/folders/{folder_id}'


class GoogleDriveError(ExternalServiceError):
    """Custom exception for Google Drive API errors."""
    pass


@dataclass(frozen=True)
class DriveFolder:
    """Reference to a Drive folder."""
    id: str
    name: str

    @property
    def url(self) -> str:
        return FOLDER_URL_TEMPLATE.format(folder_id=self.id)


def _escape_query_value(value: str) -> str:
    return value.replace('\\', '\\\\').replace("'", "\\'")


class GoogleDriveService:
    """Service for Google Drive API operations."""

    def __init__(self, credentials: Any) -> None:
        try:
            self.service = build('drive', 'v3', credentials=credentials, cache_discovery=False)
        except Exception as e:
            raise GoogleDriveError(f"Failed to initialize Google Drive service: {e}")

    def find_folders_by_name(self, name: str) -> List[DriveFolder]:
        """
        Find non-trashed folders whose name is exactly ``name``.

        Returns:
            Matching folders in the order Drive lists them
        """
        query = (
            f"mimeType = '{FOLDER_MIME_TYPE}' and name = '{_escape_query_value(name)}' "
            "and trashed = false"
        )
        try:
            response = self.service.files().list(
                q=query,
                fields='files(id, name)',
                spaces='drive',
            ).execute()
        except HttpError as e:
            raise GoogleDriveError(f"Failed to search folders named '{name}': {http_error_message(e)}")
        except Exception as e:
            raise GoogleDriveError(f"Unexpected error searching folders named '{name}': {e}")

        return [DriveFolder(id=f['id'], name=f['name']) for f in response.get('files', [])]

    def create_folder(self, name: str, parent_id: Optional[str] = None) -> DriveFolder:
        """Create a folder, inside ``parent_id`` or at the Drive root."""
        body: dict[str, Any] = {'name': name, 'mimeType': FOLDER_MIME_TYPE}
        if parent_id:
            body['parents'] = [parent_id]
        try:
            folder = self.service.files().create(body=body, fields='id, name').execute()
        except HttpError as e:
            raise GoogleDriveError(f"Failed to create folder '{name}': {http_error_message(e)}")
        except Exception as e:
            raise GoogleDriveError(f"Unexpected error creating folder '{name}': {e}")

        logger.info(f"Created Drive folder {folder['id']} ('{name}')")
        return DriveFolder(id=folder['id'], name=folder['name'])

    def get_folder(self, folder_id: str) -> DriveFolder:
        try:
            folder = self.service.files().get(fileId=folder_id, fields='id, name').execute()
        except HttpError as e:
            if http_error_status(e) == 404:
                raise GoogleDriveError(f"Folder {folder_id} not found")
            raise GoogleDriveError(f"Failed to get folder {folder_id}: {http_error_message(e)}")
        except Exception as e:
            raise GoogleDriveError(f"Unexpected error getting folder {folder_id}: {e}")
        return DriveFolder(id=folder['id'], name=folder['name'])

    def get_parent_folder(self, file_id: str) -> Optional[DriveFolder]:
        """Get the first parent folder of a file, or None at the Drive root."""
        try:
            file = self.service.files().get(fileId=file_id, fields='parents').execute()
        except HttpError as e:
            if http_error_status(e) == 404:
                raise GoogleDriveError(f"File {file_id} not found")
            raise GoogleDriveError(f"Failed to get parents of {file_id}: {http_error_message(e)}")
        except Exception as e:
            raise GoogleDriveError(f"Unexpected error getting parents of {file_id}: {e}")

        parents = file.get('parents') or []
        if not parents:
            return None
        return self.get_folder(parents[0])

    def move_file(self, file_id: str, folder_id: str) -> None:
        """Move a file into a folder, detaching it from its previous parents."""
        try:
            file = self.service.files().get(fileId=file_id, fields='parents').execute()
            previous_parents = ','.join(file.get('parents') or [])
            self.service.files().update(
                fileId=file_id,
                addParents=folder_id,
                removeParents=previous_parents,
                fields='id, parents',
            ).execute()
        except HttpError as e:
            raise GoogleDriveError(f"Failed to move {file_id} into {folder_id}: {http_error_message(e)}")
        except Exception as e:
            raise GoogleDriveError(f"Unexpected error moving {file_id} into {folder_id}: {e}")

        logger.debug(f"Moved {file_id} into folder {folder_id}")
