"""
Main entry point for the EduRecords platform.
"""

import json
import logging
import threading
import time
from typing import Any, Dict, Optional

from .core.clock import SystemClock, uuid4_id
from .core.exceptions import ConfigurationError, RecordNotFoundError
from .core.interfaces import Clock, IdFactory
from .persistence import DatabaseFactory, RepositoryRegistry, StoreFactory
from .api.rest_api import EduRecordsRestAPI

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, Any] = {
    "store_type": "sqlite",
    "database_config": {"database_path": "edurecords.db"},
    "rest_host": "0.0.0.0",
    "rest_port": 8000,
    "log_level": "INFO",
}


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Load a JSON configuration file and merge it over the defaults."""
    config = dict(DEFAULT_CONFIG)
    config["database_config"] = dict(DEFAULT_CONFIG["database_config"])
    if path is None:
        return config

    try:
        with open(path, "r") as f:
            overrides = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Cannot read configuration file {path}: {e}")

    if not isinstance(overrides, dict):
        raise ConfigurationError(f"Configuration file {path} must contain a JSON object")

    database_overrides = overrides.pop("database_config", {})
    config.update(overrides)
    config["database_config"].update(database_overrides)
    return config


class EduRecordsPlatform:
    """Wires stores, repositories and the REST API together."""

    def __init__(self, config: Optional[dict] = None, clock: Optional[Clock] = None,
                 id_factory: Optional[IdFactory] = None):
        self._config = load_config()
        self._config.update(config or {})
        self._clock = clock or SystemClock()
        self._id_factory = id_factory or uuid4_id
        self._database = None
        self._repositories = None
        self._rest_api = None
        self._rest_thread = None
        self._running = False

        # Initialize platform
        self._initialize_platform()

    @property
    def config(self) -> Dict[str, Any]:
        return self._config

    @property
    def repositories(self) -> RepositoryRegistry:
        return self._repositories

    @property
    def rest_api(self) -> EduRecordsRestAPI:
        return self._rest_api

    def _initialize_platform(self):
        """Initialize the platform with all components."""
        print("Initializing EduRecords platform...")

        store_type = str(self._config.get("store_type", "sqlite")).lower()
        if store_type == "sqlite":
            db_config = self._config.get("database_config", {})
            self._database = DatabaseFactory.create_database("sqlite", **db_config)
            print(f"✓ Database initialized: {self._database.database_path}")

        self._repositories = RepositoryRegistry.build(
            lambda collection: StoreFactory.create_store(store_type, collection, self._database),
            clock=self._clock,
            id_factory=self._id_factory
        )
        print(f"✓ Repositories initialized ({store_type} store)")

        self._rest_api = EduRecordsRestAPI(self._repositories)
        print("✓ REST API initialized")

    def start_rest_server(self, host: Optional[str] = None, port: Optional[int] = None):
        """Start the REST server in a background thread."""
        if self._rest_thread is not None:
            print("REST server already running")
            return

        import uvicorn

        host = host or self._config["rest_host"]
        port = port or self._config["rest_port"]

        def run_server():
            uvicorn.run(
                self._rest_api.app,
                host=host,
                port=port,
                log_level=self._config["log_level"].lower()
            )

        self._rest_thread = threading.Thread(target=run_server, daemon=True)
        self._rest_thread.start()
        self._running = True

        print(f"✓ REST server started on {host}:{port}")
        print(f"  - API Docs: http://localhost:{port}/docs")

    def stop_platform(self):
        """Stop the platform."""
        if not self._running:
            return
        # uvicorn runs in a daemon thread and exits with the process.
        self._rest_thread = None
        self._running = False
        print("✓ EduRecords platform stopped")

    def create_sample_data(self) -> Dict[str, Any]:
        """Create sample data for demonstration."""
        print("Creating sample data...")
        repos = self._repositories

        math = repos.subjects.create("Mathematics")
        physics = repos.subjects.create("Physics")

        ada = repos.students.create("Ada", "pw1")
        alan = repos.students.create("Alan", "pw2")
        ada = repos.students.update(ada.id, subjects=[math, physics])

        teacher = repos.teachers.create("Grace", "secret")
        form = repos.classes.create("Form 4B", teacher)

        homework = repos.assignments.create("HW1", math, ["p1", "p2"])
        submission = repos.submissions.create(ada, homework, ["p1 done", "p2 done"])

        print("✓ Sample data created")
        return {
            "subjects": [math, physics],
            "students": [ada, alan],
            "teacher": teacher,
            "class": form,
            "assignment": homework,
            "submission": submission,
        }

    def run_demo(self):
        """Run a demonstration of the record lifecycle."""
        print("Running EduRecords demonstration...")
        repos = self._repositories
        sample = self.create_sample_data()

        print("\n=== Student lifecycle ===")
        student = repos.students.create("Ada", "pw1")
        print(f"Created: {student}")
        student = repos.students.update(student.id, name="Ada L.")
        print(f"Updated: name={student.name} updated_at={student.updated_at}")
        removed = repos.students.delete(student.id)
        print(f"Deleted: {removed}")
        try:
            repos.students.get(student.id)
        except RecordNotFoundError as e:
            print(f"Lookup after delete: {e.message}")

        print("\n=== Embedded snapshots ===")
        math = sample["subjects"][0]
        repos.subjects.update(math.id, "Advanced Mathematics")
        assignment = repos.assignments.get(sample["assignment"].id)
        print(f"Subject now: {repos.subjects.get(math.id).name}")
        print(f"Assignment still embeds: {assignment.subject.name}")

        print("\n=== Collection sizes ===")
        for name, repository in self._repositories.as_dict().items():
            print(f"{name}: {repository.count()}")

        print("\n✓ Demo completed")


def main():
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(description="EduRecords record store")
    parser.add_argument("--host", type=str, help="REST server host")
    parser.add_argument("--rest-port", type=int, help="REST server port")
    parser.add_argument("--demo", action="store_true", help="Run demo mode")
    parser.add_argument("--config", type=str, help="Configuration file path")

    args = parser.parse_args()

    # Load configuration
    config = load_config(args.config)
    if args.demo:
        config["store_type"] = "memory"

    logging.basicConfig(
        level=getattr(logging, str(config["log_level"]).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    platform = EduRecordsPlatform(config)

    try:
        if args.demo:
            platform.run_demo()
        else:
            platform.start_rest_server(args.host, args.rest_port)

            # Keep running
            print("\nPlatform is running. Press Ctrl+C to stop.")
            while True:
                time.sleep(1)

    except KeyboardInterrupt:
        print("\nShutting down...")
        platform.stop_platform()


if __name__ == "__main__":
    main()
