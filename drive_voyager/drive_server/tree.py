"""Recursive expansion of a Drive folder into a nested tree."""

import logging
from enum import Enum
from typing import Dict, List, Set, TypedDict

from ..exceptions import FolderCycleError
from .drive_utils import FOLDER_MIME_TYPE, DriveClient

logger = logging.getLogger(__name__)


class FolderTree(TypedDict, total=False):
    id: str
    name: str
    mimeType: str
    contents: List["FolderTree"]


class ItemKind(Enum):
    FOLDER = "folder"
    FILE = "file"


def classify(item: Dict) -> ItemKind:
    """Tell folders from files by the Drive folder mimeType."""
    if item.get("mimeType") == FOLDER_MIME_TYPE:
        return ItemKind.FOLDER
    return ItemKind.FILE


def build_folder_tree(drive_client: DriveClient, folder_id: str) -> FolderTree:
    """Return the folder's metadata with every descendant nested under ``contents``.

    Children keep the order Drive lists them in. Subfolders are expanded
    depth-first, one metadata and one listing call per folder. Any API error
    aborts the whole build. A folder that turns up inside itself raises
    ``FolderCycleError``.
    """
    return _expand(drive_client, folder_id, set())


def _expand(drive_client: DriveClient, folder_id: str, ancestors: Set[str]) -> FolderTree:
    if folder_id in ancestors:
        raise FolderCycleError(folder_id)

    folder: FolderTree = dict(drive_client.get_file_metadata(folder_id))
    children = drive_client.list_files(folder_id)

    ancestors.add(folder_id)
    contents: List[FolderTree] = []
    for child in children:
        kind = classify(child)
        if kind is ItemKind.FOLDER and child.get("id"):
            contents.append(_expand(drive_client, child["id"], ancestors))
        else:
            contents.append(child)
    ancestors.discard(folder_id)

    logger.debug("Expanded folder '%s' with %d entries", folder_id, len(contents))
    folder["contents"] = contents
    return folder
