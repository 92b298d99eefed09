"""
Service Container - Dependency Injection Container for TriviaDuel
Builds the services, resolves their dependencies and wires the render sink.
"""

import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)


class ServiceLifecycle(Enum):
    """Service lifecycle management options"""
    SINGLETON = "singleton"  # One instance per container
    TRANSIENT = "transient"  # New instance every time


class ServiceDefinition:
    """How a service is created and what it needs"""

    def __init__(
        self,
        name: str,
        factory: Callable,
        dependencies: Optional[List[str]] = None,
        lifecycle: ServiceLifecycle = ServiceLifecycle.SINGLETON
    ):
        self.name = name
        self.factory = factory
        self.dependencies = dependencies or []
        self.lifecycle = lifecycle


class CircularDependencyError(Exception):
    """Raised when circular dependency is detected"""
    pass


class ServiceNotFoundError(Exception):
    """Raised when requested service is not registered"""
    pass


class ServiceContainer:
    """
    Dependency Injection Container for managing services and their dependencies.

    Dependencies are declared by name at registration and passed positionally
    to the factory. External objects such as the Flask-SocketIO instance are
    injected with set_external_dependency().
    """

    def __init__(self):
        self._services: Dict[str, ServiceDefinition] = {}
        self._instances: Dict[str, Any] = {}
        self._creating: set = set()
        self._config: Dict[str, Any] = {}

    def register(
        self,
        name: str,
        factory: Callable,
        dependencies: Optional[List[str]] = None,
        lifecycle: ServiceLifecycle = ServiceLifecycle.SINGLETON
    ) -> 'ServiceContainer':
        """
        Register a service with the container.

        Args:
            name: Service name for retrieval
            factory: Class or function to create the service
            dependencies: Names of the services passed to the factory, in order
            lifecycle: How the service instance should be managed

        Returns:
            Self for method chaining
        """
        if name in self._services:
            raise ValueError(f"Service '{name}' is already registered")
        if not callable(factory):
            raise ValueError(f"Factory for '{name}' must be callable")

        self._services[name] = ServiceDefinition(
            name=name,
            factory=factory,
            dependencies=dependencies,
            lifecycle=lifecycle
        )
        return self

    def configure_services(self) -> 'ServiceContainer':
        """Register all TriviaDuel services with their dependencies."""
        from config_factory import ConfigurationFactory
        from src.game_manager import GameManager
        from src.game_store import GameStore
        from src.trivia_client import TriviaApiClient
        from src.services.broadcast_service import BroadcastService
        from src.services.error_response_factory import ErrorResponseFactory
        from src.services.game_state_presenter import GameStatePresenter
        from src.services.question_batch_service import QuestionBatchService
        from src.services.session_service import SessionService
        from src.services.validation_service import ValidationService

        self.register('ConfigurationFactory', ConfigurationFactory)

        # Stateless helpers
        self.register('ValidationService', ValidationService)
        self.register('ErrorResponseFactory', ErrorResponseFactory)
        self.register('SessionService', SessionService)
        self.register('GameStatePresenter', GameStatePresenter)

        # Trivia sources
        self.register('TriviaApiClient', TriviaApiClient)
        self.register('QuestionBatchService', QuestionBatchService, dependencies=['TriviaApiClient'])

        # Game state
        self.register('GameStore', GameStore)
        self.register('GameManager', GameManager,
                      dependencies=['GameStore', 'TriviaApiClient', 'QuestionBatchService'])

        # Broadcast service - socketio is injected as an external dependency
        self.register('BroadcastService', BroadcastService, dependencies=['socketio', 'GameStatePresenter'])

        return self

    def set_external_dependency(self, name: str, instance: Any) -> 'ServiceContainer':
        """Set a dependency created outside the container, like the SocketIO instance."""
        self._instances[name] = instance
        return self

    def set_config(self, config: Dict[str, Any]) -> 'ServiceContainer':
        self._config.update(config)
        return self

    def get_config(self, key: str, default: Any = None) -> Any:
        return self._config.get(key, default)

    def get(self, name: str) -> Any:
        """
        Get a service instance, creating it if necessary.

        Raises:
            ServiceNotFoundError: If service is not registered
            CircularDependencyError: If circular dependency detected
        """
        if name in self._instances:
            return self._instances[name]

        if name not in self._services:
            raise ServiceNotFoundError(f"Service '{name}' is not registered")

        return self._create_service(name)

    def _create_service(self, name: str) -> Any:
        if name in self._creating:
            cycle = ' -> '.join(list(self._creating) + [name])
            raise CircularDependencyError(f"Circular dependency detected: {cycle}")

        self._creating.add(name)
        try:
            service_def = self._services[name]
            dependencies = [self.get(dep_name) for dep_name in service_def.dependencies]

            instance = service_def.factory(*dependencies)

            if service_def.lifecycle == ServiceLifecycle.SINGLETON:
                self._instances[name] = instance

            return instance
        finally:
            self._creating.discard(name)

    def has_service(self, name: str) -> bool:
        return name in self._services

    def get_service_names(self) -> List[str]:
        return list(self._services.keys())

    def validate_dependencies(self) -> Dict[str, List[str]]:
        """
        Validate all service dependencies can be resolved.

        Returns:
            Dictionary mapping service names to lists of missing dependencies
        """
        issues = {}
        for name, service_def in self._services.items():
            missing_deps = [
                dep for dep in service_def.dependencies
                if not self.has_service(dep) and dep not in self._instances
            ]
            if missing_deps:
                issues[name] = missing_deps
        return issues

    def clear(self) -> 'ServiceContainer':
        """Clear all services and instances (useful for testing)"""
        self._services.clear()
        self._instances.clear()
        self._creating.clear()
        self._config.clear()
        return self

    def get_dependency_graph(self) -> Dict[str, List[str]]:
        return {name: service_def.dependencies for name, service_def in self._services.items()}

    def __repr__(self) -> str:
        return f"ServiceContainer(services={len(self._services)}, instances={len(self._instances)})"


# Global container instance for the application
_app_container: Optional[ServiceContainer] = None


def get_container() -> ServiceContainer:
    """Get the global application service container"""
    global _app_container
    if _app_container is None:
        _app_container = ServiceContainer()
    return _app_container


def reset_container() -> None:
    """Drop the global container (tests)"""
    global _app_container
    if _app_container is not None:
        _app_container.clear()
    _app_container = None


def configure_container(socketio=None, config=None) -> ServiceContainer:
    """
    Configure the global service container with TriviaDuel services.

    When a SocketIO instance is given, the BroadcastService is subscribed to
    GameManager transitions so every state change reaches the clients.

    Args:
        socketio: Flask-SocketIO instance
        config: Application configuration

    Returns:
        Configured service container
    """
    container = get_container()
    container.clear()

    if socketio is not None:
        container.set_external_dependency('socketio', socketio)

    if config is not None:
        container.set_config(config)

    container.configure_services()

    if socketio is not None:
        game_manager = container.get('GameManager')
        broadcast_service = container.get('BroadcastService')
        game_manager.add_state_listener(broadcast_service.broadcast_game_state)
        logger.debug("BroadcastService subscribed to game state transitions")

    return container
