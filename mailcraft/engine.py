"""Flask application engine hosting the campaign authoring actions."""

import logging
import os
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor, TimeoutError
from typing import Any

from flask import Blueprint, Flask, jsonify, make_response, request, session
from flask_babel import Babel

from mailcraft.config import Config
from mailcraft.db.db import DB

logger = logging.getLogger(__name__)

HEALTH_CHECK_TIMEOUT = 10  # seconds


class Engine(Flask):
    def __init__(self, config: Config, db: DB, import_name: str) -> None:
        """Initialize the Engine.

        Args:
            config: Application configuration.
            db: Repository of messages and media items.
            import_name: Name of the application module.
        """
        super().__init__(import_name)
        self.config.from_mapping(config.model_dump(by_alias=True))
        self.db = db
        self.health_checks: list[tuple[str, Callable[[], None]]] = []
        self.telemetry_instrumented: bool = False

        directory = os.path.dirname(os.path.realpath(__file__))
        translation_directories = [*config.translation_directories, os.path.join(directory, "locale")]
        self.babel = Babel(
            self,
            locale_selector=self.get_locale,
            default_translation_directories=";".join(translation_directories),
        )
        self._register_default_health_endpoints()

    def get_locale(self) -> str:
        """Pick the UI language: session choice, then Accept-Language, then English."""
        languages = self.config.get("LANGUAGES", {}).keys()
        lang = session.get(
            "language",
            request.accept_languages.best_match(languages, "en"),
        )
        session["language"] = lang
        return lang

    def add_health_check(self, name: str, check_function: Callable[[], None]) -> None:
        """Register a health check function"""
        if not callable(check_function):
            raise TypeError(f"check_function must be callable, got {type(check_function)}")
        self.health_checks.append((name, check_function))

    def _register_default_health_endpoints(self) -> None:
        health_bp = Blueprint("health", __name__)

        def run_health_check(
            executor: ThreadPoolExecutor,
            check_func: Callable[[], None],
            timeout: int,
        ) -> str:
            future = executor.submit(check_func)
            try:
                future.result(timeout=timeout)
                return "ok"
            except TimeoutError:
                return "failed: timeout"
            except Exception as e:
                logger.warning("Health check failed: %s", e)
                return f"failed: {e!s}"

        @health_bp.route("/health/liveness")
        def liveness():
            return jsonify({"status": "alive"}), 200

        @health_bp.route("/health/readiness")
        def readiness():
            health_status: dict[str, Any] = {"status": "ready", "checks": {}}
            all_checks = [("database", self.db.health_check), *self.health_checks]

            executor = ThreadPoolExecutor(max_workers=1)
            try:
                for check_name, check_func in all_checks:
                    status = run_health_check(executor, check_func, HEALTH_CHECK_TIMEOUT)
                    health_status["checks"][check_name] = status
                    if status != "ok":
                        health_status["status"] = "not_ready"
            finally:
                executor.shutdown(wait=False)

            status_code = 200 if health_status["status"] == "ready" else 503
            return make_response(jsonify(health_status), status_code)

        @health_bp.route("/health")
        def health():
            return liveness()

        self.register_blueprint(health_bp)
