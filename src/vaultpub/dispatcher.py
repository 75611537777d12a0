"""Terminal actions run on the rewritten note."""

from __future__ import annotations

from vaultpub.errors import VaultpubInvalidActionError
from vaultpub.vault.base import Clipboard, Notifier

ACTION_PUBLISH = "PUBLISH"

ACTIONS = frozenset({ACTION_PUBLISH})


def dispatch(
    action: str,
    text: str,
    clipboard: Clipboard,
    notifier: Notifier,
) -> None:
    """Run *action* on *text*.

    ``PUBLISH`` copies the text to the clipboard and tells the user.

    Raises
    ------
    VaultpubInvalidActionError
        If *action* is not a known action.
    """
    if action == ACTION_PUBLISH:
        clipboard.write_text(text)
        notifier.notify("Copied to clipboard")
        return

    raise VaultpubInvalidActionError(
        message=f"invalid action: {action!r}",
        context={"action": action, "allowed": sorted(ACTIONS)},
    )
