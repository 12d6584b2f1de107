"""
Fragment loader - executes the fragment files of a group.

Each fragment is a Python file listed in the manifest. Its top-level code
runs once per session, with the shell environment bound so that decorators
register commands into it:

    # <fragments_dir>/dev/git.py
    from fragsh import command
    from fragsh.wrappers import run_tool

    @command("gst", "git status")
    def gst(args):
        return run_tool("git", "status", *args)

Outcomes are memoized per absolute path across all groups, so a helper
shared by two groups executes exactly once.
"""

from __future__ import annotations

import hashlib
import logging
import sys
from importlib.util import module_from_spec, spec_from_file_location
from pathlib import Path

from fragsh.core.datamodels import FileLoadRecord, FileOutcome, LoadSummary, ModuleDescriptor
from fragsh.core.environment import ShellEnvironment, fragment_scope
from fragsh.core.helpers import _normalize_name
from fragsh.core.registry import ModuleRegistry
from fragsh.logging import log_fragment_exception
from fragsh.session.context import SessionContext

logger = logging.getLogger(__name__)

# Module name prefix for sys.modules
MODULE_PREFIX = "fragsh_fragment"


def fragment_module_name(
    descriptor: ModuleDescriptor,
    path: Path | str,
    prefix: str = MODULE_PREFIX,
) -> str:
    """Module name a fragment is registered under in sys.modules.

    The readable part comes from the relative path; the suffix is derived
    from the absolute path, so "dev/git.py" and "dev_git.py" never share
    a name.
    """
    readable = _normalize_name("_".join((*descriptor.dir_segments, descriptor.stem)))
    digest = hashlib.sha1(str(path).encode("utf-8")).hexdigest()[:8]
    return f"{prefix}.{readable}_{digest}"


class FragmentLoader:
    """Loads a group's fragments into a shell environment."""

    def __init__(
        self,
        modules: ModuleRegistry,
        context: SessionContext,
        environment: ShellEnvironment,
        debug: bool = False,
    ):
        self.modules = modules
        self.context = context
        self.environment = environment
        self.debug = debug

    def load_group(self, group_id: str, base_dir: Path | str) -> LoadSummary:
        """Load every fragment of a group, in manifest order.

        Never raises: missing files are skipped, failing files are recorded
        and the batch continues.

        Args:
            group_id: Group to load
            base_dir: Directory the descriptors are relative to

        Returns:
            LoadSummary with loaded/failed/skipped counts.
        """
        records: list[FileLoadRecord] = []

        for descriptor in self.modules.resolve(group_id):
            path_error: Exception | None = None
            try:
                path = descriptor.resolve_path(base_dir)
                key = str(path)
            except (OSError, RuntimeError, ValueError) as e:
                path_error = e
                key = str(Path(base_dir).expanduser().joinpath(*descriptor.dir_segments, descriptor.file_name))

            record = self.context.file_records.get(key)
            if record is not None:
                logger.debug(f"Reusing {record.outcome.value} outcome for {descriptor.relative_path}")
                records.append(record)
                continue

            if key in self.context.in_flight:
                # Referenced again while its own top-level code is running
                logger.debug(f"Fragment already loading: {descriptor.relative_path}")
                continue

            if path_error is not None:
                record = self._failed(descriptor, key, f"Invalid path: {path_error}", path_error)
            else:
                record = self.load_file(descriptor, path)
            self.context.record_file(record)
            records.append(record)

        summary = LoadSummary.from_records(group_id, records)
        logger.debug(
            f"Group '{group_id}': {summary.loaded} loaded, "
            f"{summary.failed} failed, {summary.skipped} skipped"
        )
        return summary

    def load_file(self, descriptor: ModuleDescriptor, path: Path) -> FileLoadRecord:
        """Execute a single fragment file.

        Args:
            descriptor: The fragment's descriptor
            path: Its absolute path

        Returns:
            FileLoadRecord for the file (not yet stored in the context).
        """
        key = str(path)
        module_name = fragment_module_name(descriptor, key)

        try:
            exists = path.exists()
            is_file = exists and path.is_file()
        except (OSError, ValueError) as e:
            return self._failed(descriptor, key, f"Cannot access fragment: {e}", e)

        if not exists:
            logger.debug(f"Skipping {descriptor.relative_path}: not installed")
            return FileLoadRecord(path=key, outcome=FileOutcome.SKIPPED)

        if not is_file:
            return self._failed(descriptor, key, "Not a file")

        module = None
        self.context.in_flight.add(key)
        try:
            spec = spec_from_file_location(module_name, path)
            if spec is None or spec.loader is None:
                return self._failed(descriptor, key, "Could not create module spec")

            module = module_from_spec(spec)
            sys.modules[module_name] = module
            self.context.executions += 1
            with fragment_scope(self.environment, key):
                spec.loader.exec_module(module)

        except SyntaxError as e:
            return self._failed(descriptor, key, f"Syntax error: {e}", e, module_name, module)
        except ImportError as e:
            return self._failed(descriptor, key, f"Import error: {e}", e, module_name, module)
        except (Exception, SystemExit) as e:
            return self._failed(descriptor, key, f"Error: {e}", e, module_name, module)
        finally:
            self.context.in_flight.discard(key)

        if self.debug:
            logger.info(f"Loaded fragment: {descriptor.relative_path}")
        return FileLoadRecord(path=key, outcome=FileOutcome.LOADED, module_name=module_name)

    def _failed(
        self,
        descriptor: ModuleDescriptor,
        key: str,
        message: str,
        error: BaseException | None = None,
        module_name: str | None = None,
        module: object | None = None,
    ) -> FileLoadRecord:
        # Only drop the entry this load created
        if module is not None and sys.modules.get(module_name) is module:
            del sys.modules[module_name]
        context = f"Failed to load fragment '{descriptor.relative_path}'"
        if error is not None:
            log_fragment_exception(error, context=context, verbose=self.debug, logger=logger)
        else:
            logger.log(logging.WARNING if self.debug else logging.DEBUG, f"{context}: {message}")
        return FileLoadRecord(
            path=key,
            outcome=FileOutcome.FAILED,
            module_name=module_name,
            error=message,
        )
