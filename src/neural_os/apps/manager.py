"""
App Manager - owns the app list and routes updates to it
Handles generated apps, local actions, timer ticks and persistence.
"""

import time
from collections.abc import Mapping
from typing import Any

from neural_os.blueprint import GenerationResult, RenderedNode, TreeRenderer, normalize_blueprint
from neural_os.blueprint.models import Archetype
from neural_os.core import get_logger, LogContext
from neural_os.engine import DEFAULT_ITEM_LABEL, advance_apps, apply_action, ensure_item_ids
from .models import App
from .store import AppStore

logger = get_logger(__name__)


class AppManager:
    """
    Central owner of micro-app state.

    Responsibilities:
    - Create apps from generation results, or replace an existing app's
      blueprint and data wholesale on a follow-up generation
    - Apply local actions through the mutation engine
    - Advance running timers on each tick
    - Persist through the injected store after every change

    Apps are replaced, never mutated, so any App handed out stays a valid
    snapshot.
    """

    def __init__(
        self,
        store: AppStore,
        renderer: TreeRenderer | None = None,
        default_item_label: str = DEFAULT_ITEM_LABEL,
    ) -> None:
        self.store = store
        self.renderer = renderer or TreeRenderer()
        self.default_item_label = default_item_label
        self.apps: dict[str, App] = {app.id: app for app in store.load()}
        self.active_app_id: str | None = None
        logger.info("app_manager_initialized", apps=len(self.apps))

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def apply_generation(self, result: GenerationResult, app_id: str | None = None) -> App | None:
        """
        Create or update an app from a generation result.

        Args:
            result: Parsed model response
            app_id: App to update; a new app is created when None or unknown

        Returns:
            The new or updated app, or None for message-only results
        """
        if not result.is_app:
            return None

        blueprint = normalize_blueprint(result.blueprint)
        data = ensure_item_ids(result.initial_state)
        existing = self.apps.get(app_id) if app_id else None

        if existing:
            app = existing.model_copy(
                update={
                    "title": result.tool_name,
                    "archetype": result.archetype,
                    "blueprint": blueprint,
                    "data": data,
                    "updated_at": time.time(),
                }
            )
            logger.info("app_updated", app_id=app.id, title=app.title)
        else:
            if app_id:
                logger.warning("update_target_missing", app_id=app_id)
            app = App(title=result.tool_name, archetype=result.archetype, blueprint=blueprint, data=data)
            logger.info(
                "app_created",
                app_id=app.id,
                title=app.title,
                archetype=app.archetype.value if app.archetype else None,
                blocks=len(blueprint),
            )

        self.apps[app.id] = app
        self.active_app_id = app.id
        self._persist()
        return app

    def get_app(self, app_id: str) -> App | None:
        """Get app by ID."""
        return self.apps.get(app_id)

    def get_active_app(self) -> App | None:
        """Get the currently focused app."""
        if self.active_app_id:
            return self.apps.get(self.active_app_id)
        return None

    def list_apps(self, archetype: Archetype | None = None) -> list[App]:
        """
        List apps in creation order, optionally filtered by archetype.

        Args:
            archetype: Optional archetype filter

        Returns:
            List of apps
        """
        apps = list(self.apps.values())
        if archetype:
            apps = [app for app in apps if app.archetype == archetype]
        return apps

    def focus_app(self, app_id: str | None) -> bool:
        """
        Focus an app, or clear focus with None.

        Returns:
            True if successful, False if app not found
        """
        if app_id is not None and app_id not in self.apps:
            logger.warning("focus_target_missing", app_id=app_id)
            return False
        self.active_app_id = app_id
        return True

    def delete_app(self, app_id: str) -> bool:
        """
        Delete an app.

        Returns:
            True if successful, False if app not found
        """
        app = self.apps.pop(app_id, None)
        if app is None:
            logger.warning("delete_target_missing", app_id=app_id)
            return False

        if self.active_app_id == app_id:
            self.active_app_id = None

        self._persist()
        logger.info("app_deleted", app_id=app_id, title=app.title)
        return True

    # ------------------------------------------------------------------
    # Local updates
    # ------------------------------------------------------------------

    def dispatch(
        self,
        app_id: str,
        action: str,
        payload: Mapping[str, Any] | None = None,
        form_state: Mapping[str, Any] | None = None,
    ) -> App | None:
        """
        Apply a local action to one app's data.

        Returns:
            The updated app, or None if the app does not exist

        Raises:
            UnknownActionError: If the action is not in the catalogue
        """
        app = self.apps.get(app_id)
        if app is None:
            logger.warning("dispatch_target_missing", app_id=app_id, action=action)
            return None

        with LogContext(app_id=app_id, action=action):
            data = apply_action(
                action,
                payload,
                app.data,
                form_state,
                default_item_label=self.default_item_label,
            )

        if data is app.data:
            return app

        app = app.model_copy(update={"data": data, "updated_at": time.time()})
        self.apps[app_id] = app
        self._persist()
        return app

    def tick(self) -> list[str]:
        """
        Advance all running timers by one tick.

        Returns:
            IDs of apps whose data changed
        """
        current = list(self.apps.values())
        advanced = advance_apps(current)

        changed = []
        for before, after in zip(current, advanced):
            if after is not before:
                self.apps[after.id] = after
                changed.append(after.id)

        if changed:
            self._persist()
        return changed

    def render(
        self,
        app_id: str,
        form_state: Mapping[str, Any] | None = None,
    ) -> RenderedNode | None:
        """
        Render an app with interactions routed back to ``dispatch``.

        Args:
            app_id: App to render
            form_state: Input values, read when an interaction resolves $INPUT references

        Returns:
            Visual tree, or None if the app does not exist
        """
        app = self.apps.get(app_id)
        if app is None:
            return None

        def on_action(action: str, payload: dict[str, Any]) -> None:
            self.dispatch(app_id, action, payload, form_state)

        return self.renderer.render(app.blueprint, app.data, on_action)

    def get_stats(self) -> dict[str, Any]:
        """Get app manager statistics."""
        active = self.get_active_app()
        return {
            "total_apps": len(self.apps),
            "by_archetype": {
                archetype.value: len(self.list_apps(archetype)) for archetype in Archetype
            },
            "active_app": active.title if active else None,
        }

    def _persist(self) -> None:
        self.store.save(list(self.apps.values()))


__all__ = ["AppManager"]
