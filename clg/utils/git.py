"""Git repository helpers for clg."""

import logging
import os
import shlex
import subprocess
from typing import NamedTuple, Protocol
from urllib.parse import urlsplit

from clg.errors import GitError

logger = logging.getLogger(__name__)

PUSH_TIMEOUT = 120


class Credentials(NamedTuple):
    """Credentials used by git to authenticate a push over ssh."""

    username: str = "git"
    ssh_key_path: str | None = None


class PushCallbacks(Protocol):
    """Capabilities the push needs from its caller."""

    def provide_credentials(self) -> Credentials: ...

    def on_push_complete(self, ref_name: str) -> None: ...


class SshKeyCallbacks:
    """Push callbacks backed by a configured ssh key (or the ssh agent when None)."""

    def __init__(self, ssh_key_path: str | None = None, username: str = "git"):
        self.ssh_key_path = ssh_key_path
        self.username = username

    def provide_credentials(self) -> Credentials:
        return Credentials(username=self.username, ssh_key_path=self.ssh_key_path)

    def on_push_complete(self, ref_name: str) -> None:
        logger.info(f"Updated remote ref {ref_name}")


def find_git_root(start_path: str) -> str | None:
    """Find git repository root using git command (works with worktrees automatically).

    Args:
        start_path: Starting directory path

    Returns:
        Path to git repository root, or None if not in a git repository
    """
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--show-toplevel"],
            cwd=start_path,
            capture_output=True,
            text=True,
            timeout=5,
        )

        if result.returncode == 0:
            git_root = result.stdout.strip()
            logger.debug(f"Found git repository at {git_root}")
            return git_root

        logger.debug(f"Not a git repository: {start_path}")
        return None

    except subprocess.TimeoutExpired:
        logger.error(f"Git command timed out at {start_path}")
        return None
    except (FileNotFoundError, NotADirectoryError):
        logger.error(f"Git command not found or invalid directory: {start_path}")
        return None


def get_current_branch(git_root: str) -> str | None:
    """Get the current git branch name, or None on a detached HEAD or error."""
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--abbrev-ref", "HEAD"], cwd=git_root, capture_output=True, text=True, timeout=5
        )
    except subprocess.TimeoutExpired:
        logger.error("Git command timed out while getting current branch")
        return None
    except FileNotFoundError:
        logger.error("Git command not found - is git installed?")
        return None

    if result.returncode != 0:
        logger.warning(f"Failed to get current branch: {result.stderr}")
        return None

    branch_name = result.stdout.strip()
    if branch_name == "HEAD":
        logger.warning("HEAD is detached, no current branch")
        return None
    logger.debug(f"Current branch: {branch_name}")
    return branch_name


def get_remote_url(git_root: str, remote: str = "origin") -> str | None:
    """Get the configured URL of a remote, exactly as git reports it."""
    try:
        result = subprocess.run(
            ["git", "remote", "get-url", remote],
            cwd=git_root,
            capture_output=True,
            text=True,
            timeout=5,
        )
    except subprocess.TimeoutExpired:
        logger.error(f"Git command timed out while getting remote URL at {git_root}")
        return None
    except FileNotFoundError:
        logger.error("Git command not found - is git installed?")
        return None

    if result.returncode != 0:
        logger.debug(f"No git remote '{remote}' found at {git_root}")
        return None

    remote_url = result.stdout.strip()
    logger.debug(f"Found remote URL: {remote_url}")
    return remote_url


def get_uncommitted_paths(git_root: str) -> list[str]:
    """List paths with staged, unstaged or untracked changes."""
    try:
        result = subprocess.run(
            ["git", "status", "--porcelain", "-z"],
            cwd=git_root,
            capture_output=True,
            text=True,
            timeout=5,
        )
    except (subprocess.TimeoutExpired, FileNotFoundError) as e:
        logger.warning(f"Could not read git status at {git_root}: {e}")
        return []

    if result.returncode != 0:
        logger.warning(f"git status failed: {result.stderr}")
        return []

    # NUL separated "XY path" entries; renames and copies are followed by their source path
    paths = []
    entries = iter(result.stdout.split("\0"))
    for entry in entries:
        if len(entry) < 4:
            continue
        paths.append(entry[3:])
        if entry[0] in "RC":
            next(entries, None)
    return paths


def remote_url_user(remote_url: str | None) -> str | None:
    """Return the user embedded in a remote URL (``user@host:path`` or ``ssh://user@host/path``)."""
    if not remote_url:
        return None
    if "://" in remote_url:
        return urlsplit(remote_url).username
    host, sep, _ = remote_url.partition(":")
    if sep and "@" in host:
        return host.rsplit("@", 1)[0]
    return None


def _ssh_command(credentials: Credentials, remote_url: str | None = None) -> str | None:
    options = []
    if credentials.username and not remote_url_user(remote_url):
        options.append(f"-l {shlex.quote(credentials.username)}")
    if credentials.ssh_key_path:
        key_path = os.path.expanduser(credentials.ssh_key_path)
        options.append(f"-i {shlex.quote(key_path)} -o IdentitiesOnly=yes")
    if not options:
        return None
    return "ssh " + " ".join(options)


def parse_push_output(output: str) -> list[tuple[str, str]]:
    """Parse ``git push --porcelain`` output into (flag, remote ref) pairs."""
    updates = []
    for line in output.splitlines():
        fields = line.split("\t")
        if len(fields) < 3 or ":" not in fields[1]:
            continue
        flag = fields[0].strip() or " "
        _, _, remote_ref = fields[1].partition(":")
        updates.append((flag, remote_ref))
    return updates


def push_branch(
    git_root: str,
    branch: str,
    callbacks: PushCallbacks,
    remote: str = "origin",
    remote_url: str | None = None,
) -> list[str]:
    """Push a local branch to the same name on the remote.

    The credentials' username is passed to ssh only when ``remote_url`` names no user.

    Args:
        git_root: Path to the git repository root
        branch: Local branch name
        callbacks: Supplies credentials and is told about every updated ref
        remote: Remote name
        remote_url: URL of ``remote``, used to tell whether it already carries a user

    Returns:
        Names of the remote refs the push updated

    Raises:
        GitError: If the push fails or a ref is rejected
    """
    credentials = callbacks.provide_credentials()
    env = dict(os.environ)
    ssh_command = _ssh_command(credentials, remote_url)
    if ssh_command:
        env["GIT_SSH_COMMAND"] = ssh_command

    refspec = f"refs/heads/{branch}:refs/heads/{branch}"
    logger.info(f"Pushing {branch} to {remote}")
    try:
        result = subprocess.run(
            ["git", "push", "--porcelain", remote, refspec],
            cwd=git_root,
            capture_output=True,
            text=True,
            timeout=PUSH_TIMEOUT,
            env=env,
        )
    except subprocess.TimeoutExpired as e:
        logger.error(f"git push to {remote} timed out")
        raise GitError(f"git push to '{remote}' timed out") from e
    except FileNotFoundError as e:
        logger.error("Git command not found - is git installed?")
        raise GitError("git executable not found") from e

    updates = parse_push_output(result.stdout)
    rejected = [ref for flag, ref in updates if flag == "!"]
    if result.returncode != 0 or rejected:
        detail = result.stderr.strip() or ", ".join(rejected)
        logger.error(f"git push to {remote} failed: {detail}")
        raise GitError(f"git push to '{remote}' failed: {detail}")

    updated = []
    for flag, ref in updates:
        if flag == "=":
            continue
        callbacks.on_push_complete(ref)
        updated.append(ref)
    return updated
