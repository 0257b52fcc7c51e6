"""Editor-side auto-slug binding.

A slug field mirrors its title field (AUTO) until the user types into the slug
field directly, after which it is LOCKED for the rest of the editing session.

Transitions:
    AUTO   --title change-->  AUTO    (slug regenerated)
    AUTO   --slug edit---->   LOCKED
    LOCKED --title change-->  LOCKED  (slug untouched)
    LOCKED --slug edit---->   LOCKED
There is no way back from LOCKED to AUTO; regenerate() re-derives once
without changing the state.

One instance per editing session. Never share an instance between sessions.
"""

from collections.abc import Callable
from enum import Enum

from backend.content_routing.models.common import Locale
from backend.content_routing.slugs.generator import generate_slug

SlugFn = Callable[[str, Locale], str]


class BindingState(str, Enum):
    """Binding state."""

    auto = "auto"
    locked = "locked"


class AutoSlugBinding:
    """Two-state machine pairing a title input with a slug input."""

    def __init__(
        self,
        locale: Locale,
        initial_title: str = "",
        initial_slug: str = "",
        slug_fn: SlugFn = generate_slug,
    ) -> None:
        """Open a binding for an edit form.

        Starts AUTO when the slug is empty or equals the slug generated from the
        initial title; any other existing slug is a custom one and starts LOCKED.

        Args:
            locale: Locale of the form's content
            initial_title: Title field value when the form opened
            initial_slug: Slug field value when the form opened
            slug_fn: Slug generator (title, locale) -> slug
        """
        self._slug_fn = slug_fn
        self._locale = locale
        self._title = initial_title

        generated = slug_fn(initial_title, locale)
        if not initial_slug or initial_slug == generated:
            self._state = BindingState.auto
            self._last_auto_slug = generated
            self._slug = generated
        else:
            self._state = BindingState.locked
            self._last_auto_slug = ""
            self._slug = initial_slug

    @property
    def state(self) -> BindingState:
        return self._state

    @property
    def locked(self) -> bool:
        return self._state == BindingState.locked

    @property
    def last_auto_slug(self) -> str:
        return self._last_auto_slug

    @property
    def current_slug(self) -> str:
        return self._slug

    @property
    def locale(self) -> Locale:
        return self._locale

    def on_title_change(self, text: str) -> str:
        """Title input changed; regenerate the slug unless locked.

        Returns:
            The slug field value after the event
        """
        self._title = text
        if self._state == BindingState.auto:
            self._apply_generated()
        return self._slug

    def on_slug_change(self, text: str) -> str:
        """User typed into the slug field; take manual control permanently."""
        self._slug = text
        self._state = BindingState.locked
        return self._slug

    def on_locale_change(self, locale: Locale) -> str:
        """Form locale switched; re-derive while still AUTO."""
        self._locale = locale
        if self._state == BindingState.auto:
            self._apply_generated()
        return self._slug

    def regenerate(self) -> str:
        """Explicit "regenerate" action: re-derive once, keep the current state."""
        self._apply_generated()
        return self._slug

    def _apply_generated(self) -> None:
        generated = self._slug_fn(self._title, self._locale)
        self._last_auto_slug = generated
        self._slug = generated
