"""Resolution service used by the request layer."""

from __future__ import annotations

import logging

from emojimash._constants import PAIR_SEPARATOR
from emojimash.exceptions import InputFormatError, NotInitializedError, RefreshError
from emojimash.models.lookup import LookupResult
from emojimash.models.refresh import RefreshOutcome
from emojimash.pair_key import split_pair
from emojimash.refresh import RefreshCoordinator
from emojimash.store import MappingStore

_logger = logging.getLogger(__name__)


class ResolutionService:
    """Answers pair queries, bootstrapping the store on first use.

    The first query against an empty store pays for one synchronous
    refresh. Queries that arrive while that refresh is still running get
    :attr:`LookupStatus.NOT_INITIALIZED` rather than waiting for it.
    """

    def __init__(
        self,
        store: MappingStore,
        coordinator: RefreshCoordinator,
        *,
        pair_separator: str = PAIR_SEPARATOR,
    ) -> None:
        self._store = store
        self._coordinator = coordinator
        self._pair_separator = pair_separator

    @property
    def store(self) -> MappingStore:
        return self._store

    @property
    def coordinator(self) -> RefreshCoordinator:
        return self._coordinator

    async def resolve_pair(self, raw: str) -> LookupResult:
        """Resolve a raw ``A_B`` query."""
        try:
            token_a, token_b = split_pair(raw, self._pair_separator)
        except InputFormatError as exc:
            return LookupResult.invalid_input(str(exc))
        return await self.resolve(token_a, token_b)

    async def resolve(self, token_a: str, token_b: str) -> LookupResult:
        if not token_a or not token_b:
            return LookupResult.invalid_input("both emoji of the pair must be non-empty")

        if not self._store.is_initialized():
            _logger.info("Mapping store empty; refreshing before first lookup")
            try:
                await self._coordinator.refresh()
            except RefreshError as exc:
                return LookupResult.error(f"{exc.stage} error while loading mapping: {exc}")

        try:
            url = self._store.lookup(token_a, token_b)
        except NotInitializedError:
            return LookupResult.not_initialized()

        if url is None:
            _logger.debug("No combination for %r + %r", token_a, token_b)
            return LookupResult.not_found()
        return LookupResult.found(url)

    async def refresh(self) -> RefreshOutcome:
        return await self._coordinator.refresh()

    async def bootstrap(self) -> None:
        """Warm the store at startup.

        Uses the archived document when one exists and parses cleanly,
        otherwise downloads the remote document. Failures are logged and
        leave the store uninitialized so the first query retries.
        """
        try:
            outcome = await self._coordinator.load_archive()
        except RefreshError:
            _logger.warning("Archived metadata unusable; falling back to remote", exc_info=True)
            outcome = None

        if outcome is not None and self._store.is_initialized():
            return

        try:
            await self._coordinator.refresh()
        except RefreshError:
            _logger.error("Initial metadata refresh failed", exc_info=True)
