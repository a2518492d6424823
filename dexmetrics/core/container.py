# dexmetrics/core/container.py

from typing import TypeVar, Type, Callable, List, Any
import inspect
import logging

from .logging import EngineLogger, log_with_context

T = TypeVar('T')


class EngineContainer:
    """Constructor-annotation dependency injection for the engine's services"""

    def __init__(self, config):
        self._config = config
        self._services = {}  # service_type -> (implementation, factory, is_singleton)
        self._instances = {}  # service_type -> instance (singletons)
        self._resolution_stack: List[Type] = []

        self._logger = EngineLogger.get_logger('core.container')
        self._logger.debug("EngineContainer initialized")

    @property
    def config(self):
        return self._config

    def register_singleton(self, interface: Type[T], implementation: Type[T]) -> 'EngineContainer':
        log_with_context(self._logger, logging.DEBUG, "Registering singleton service",
                         service=interface.__name__)
        self._services[interface] = (implementation, None, True)
        return self

    def register_transient(self, interface: Type[T], implementation: Type[T]) -> 'EngineContainer':
        log_with_context(self._logger, logging.DEBUG, "Registering transient service",
                         service=interface.__name__)
        self._services[interface] = (implementation, None, False)
        return self

    def register_factory(self, interface: Type[T], factory_func: Callable[['EngineContainer'], T]) -> 'EngineContainer':
        """Register a factory function (treated as singleton)"""
        log_with_context(self._logger, logging.DEBUG, "Registering factory service",
                         service=interface.__name__)
        self._services[interface] = (None, factory_func, True)
        return self

    def register_instance(self, interface: Type[T], instance: T) -> 'EngineContainer':
        """Register an already constructed object, e.g. a test double"""
        self._services[interface] = (None, None, True)
        self._instances[interface] = instance
        return self

    def get(self, service_type: Type[T]) -> T:
        service_name = service_type.__name__

        if service_type in self._resolution_stack:
            circular_path = " -> ".join(t.__name__ for t in self._resolution_stack) + f" -> {service_name}"
            log_with_context(self._logger, logging.ERROR, "Circular dependency detected",
                             error=circular_path)
            raise ValueError(f"Circular dependency detected: {circular_path}")

        if service_type not in self._services:
            raise ValueError(f"Service {service_name} not registered")

        implementation, factory, is_singleton = self._services[service_type]

        if is_singleton and service_type in self._instances:
            return self._instances[service_type]

        self._resolution_stack.append(service_type)
        try:
            if factory:
                instance = factory(self)
            else:
                instance = self._create_instance(implementation)

            if is_singleton:
                self._instances[service_type] = instance

            log_with_context(self._logger, logging.DEBUG, "Service instance created",
                             service=service_name)
            return instance

        except Exception as e:
            log_with_context(self._logger, logging.ERROR, "Failed to create service instance",
                             service=service_name,
                             error=str(e))
            raise
        finally:
            self._resolution_stack.pop()

    def _create_instance(self, implementation_type: Type) -> Any:
        sig = inspect.signature(implementation_type.__init__)
        kwargs = {}

        for param_name, param in sig.parameters.items():
            if param_name == 'self' or param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
                continue

            param_type = param.annotation
            if param_type is not inspect.Parameter.empty and param_type in self._services:
                kwargs[param_name] = self.get(param_type)
            elif param_name == 'config':
                kwargs[param_name] = self._config
            elif param.default is inspect.Parameter.empty:
                raise ValueError(
                    f"Cannot resolve parameter '{param_name}' of {implementation_type.__name__}"
                )

        return implementation_type(**kwargs)

    def has_service(self, service_type: Type) -> bool:
        return service_type in self._services

    def is_instantiated(self, service_type: Type) -> bool:
        return service_type in self._instances
