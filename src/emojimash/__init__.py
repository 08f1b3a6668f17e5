"""emojimash - resolve emoji pairs to pre-rendered mash-up images."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("emojimash")
except PackageNotFoundError:
    __version__ = "0+local"
from emojimash.archive import DocumentArchive
from emojimash.config import EmojiMashConfig
from emojimash.exceptions import (
    EmojiMashConfigError,
    EmojiMashError,
    InputFormatError,
    NotInitializedError,
    RefreshDecodeError,
    RefreshError,
    RefreshHttpStatusError,
    RefreshNetworkError,
    RefreshPersistError,
    RefreshStoreError,
)
from emojimash.models import (
    CombinationRecord,
    LookupResult,
    LookupStatus,
    RefreshOutcome,
    RefreshSource,
    RefreshStatus,
)
from emojimash.pair_key import normalize, split_pair
from emojimash.refresh import RefreshCoordinator, RefreshGuard
from emojimash.service import ResolutionService
from emojimash.store import MappingSnapshot, MappingStore

__all__ = [
    "__version__",
    "CombinationRecord",
    "DocumentArchive",
    "EmojiMashConfig",
    "EmojiMashConfigError",
    "EmojiMashError",
    "InputFormatError",
    "LookupResult",
    "LookupStatus",
    "MappingSnapshot",
    "MappingStore",
    "NotInitializedError",
    "RefreshCoordinator",
    "RefreshDecodeError",
    "RefreshError",
    "RefreshGuard",
    "RefreshHttpStatusError",
    "RefreshNetworkError",
    "RefreshOutcome",
    "RefreshPersistError",
    "RefreshSource",
    "RefreshStatus",
    "RefreshStoreError",
    "ResolutionService",
    "normalize",
    "split_pair",
]
