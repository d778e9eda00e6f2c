"""
Reindexer - Runs the Sphinx indexer against a delta index.

The indexer is invoked as::

    <index_command> --config <config_file> --rotate <index_name>

and the caller blocks until it exits.
"""

from __future__ import annotations

import logging
import subprocess

from sphinxsearch.config.errors import ReindexError

from .models import ReindexOutcome

logger = logging.getLogger(__name__)

__all__ = ["Reindexer"]


class Reindexer:
    """
    Runs the external index command and reports how it went.

    Example:
        >>> reindexer = Reindexer("/usr/bin/indexer", "/etc/sphinx/sphinx.conf")
        >>> outcome = reindexer.run("posts_delta")
        >>> outcome.success
        True
    """

    def __init__(
        self,
        index_command: str,
        config_file: str,
        *,
        verbose: bool = False,
        log: logging.Logger | None = None,
    ) -> None:
        """
        Initialize reindexer.

        Args:
            index_command: Path to the indexer executable
            config_file: Path to the Sphinx config the indexer reads
            verbose: Log indexer output on success too
            log: Logger to report through (module logger if omitted)
        """
        self._index_command = index_command
        self._config_file = config_file
        self._verbose = verbose
        self._log = log or logger

    def command_for(self, index_name: str) -> list[str]:
        """Argument vector that rebuilds and rotates ``index_name``."""
        return [
            self._index_command,
            "--config",
            self._config_file,
            "--rotate",
            index_name,
        ]

    def run(self, index_name: str) -> ReindexOutcome:
        """
        Rebuild an index and capture what the indexer printed.

        A non-zero exit is reported in the outcome, not raised.

        Raises:
            ReindexError: If the indexer could not be started at all
        """
        command = self.command_for(index_name)

        try:
            proc = subprocess.Popen(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
            )
        except OSError as e:
            raise ReindexError(
                f"Unable to start index command {self._index_command!r}: {e}",
                details={"command": command},
            ) from e

        # Pipes are drained to EOF even after an interruption
        while True:
            try:
                stdout, stderr = proc.communicate()
                break
            except InterruptedError:
                self._log.error(
                    "Interrupted waiting for Sphinx re-index of %s to complete", index_name
                )

        exit_code = proc.wait()
        output = (stdout or "") + (stderr or "")

        if exit_code != 0:
            error_detail = stderr or stdout or f"index command exited with status {exit_code}"
            self._log.error("Unable to re-index %s; error follows", index_name)
            self._log.error(error_detail)
            return ReindexOutcome(
                index_name=index_name,
                success=False,
                exit_code=exit_code,
                output=output,
                error_detail=error_detail,
            )

        if self._verbose:
            self._log.debug("Output from Sphinx re-indexing of %s", index_name)
            self._log.debug(stdout)

        return ReindexOutcome(
            index_name=index_name,
            success=True,
            exit_code=exit_code,
            output=output,
        )

    def reindex_delta(self, index_name: str) -> ReindexOutcome:
        """
        Rebuild a delta index, raising when the indexer fails.

        Raises:
            ReindexError: On a non-zero exit, carrying the outcome
        """
        outcome = self.run(index_name)
        if not outcome.success:
            raise ReindexError(
                f"Re-index of {index_name!r} failed with exit status {outcome.exit_code}",
                outcome=outcome,
            )
        return outcome
