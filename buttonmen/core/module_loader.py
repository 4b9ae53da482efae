"""
Module loader for the Button Men engine.

Discovers modules under buttonmen/modules or loads an explicit list, and
orders them so that every module comes after its dependencies.
"""

import importlib
import inspect
from pathlib import Path
from typing import Any, Dict, List, Optional
import logging

from ..modules.base import Module

logger = logging.getLogger(__name__)


class ModuleDependencyError(Exception):
    """Raised when module dependencies cannot be satisfied."""
    pass


class ModuleLoader:
    """
    Discovers and loads engine modules.

    Supports two loading strategies:
    1. Auto-discovery: scan buttonmen/modules/ for packages with a Module subclass
    2. Manual: an explicit list of module names (dependencies are pulled in)
    """

    def __init__(self):
        self.loaded_modules: List[Module] = []

    def load_modules(self, module_names: Optional[List[str]] = None) -> List[Module]:
        """
        Load modules in dependency order.

        Args:
            module_names: Modules to load; None discovers every available module

        Returns:
            List of Module instances, dependencies first

        Raises:
            ModuleDependencyError: If a module or one of its dependencies
                cannot be loaded, or dependencies are circular
        """
        if module_names is None:
            module_names = self._discover_module_names()

        self.loaded_modules = self._load_modules_with_dependencies(module_names)
        return self.loaded_modules

    def _modules_dir(self) -> Path:
        return Path(__file__).parent.parent / 'modules'

    def _discover_module_names(self) -> List[str]:
        """Names of module packages, alphabetically."""
        modules_dir = self._modules_dir()
        if not modules_dir.exists():
            logger.warning("Modules directory not found")
            return []

        return [
            item.name for item in sorted(modules_dir.iterdir())
            if item.is_dir() and not item.name.startswith('_')
            and (item / '__init__.py').exists()
        ]

    def _import_module(self, module_name: str) -> Optional[Module]:
        """
        Import a module by name and return its Module instance.

        Args:
            module_name: Name of module directory (e.g., 'attacks')

        Returns:
            Module instance if found, None otherwise
        """
        try:
            mod = importlib.import_module(f'..modules.{module_name}', __package__)
        except ImportError as e:
            logger.warning(f"Failed to import module '{module_name}': {e}")
            return None

        for attr_name in dir(mod):
            attr = getattr(mod, attr_name)
            if (inspect.isclass(attr) and
                    issubclass(attr, Module) and
                    attr is not Module and
                    not inspect.isabstract(attr) and
                    attr.__module__.startswith(mod.__name__)):
                return attr()

        logger.warning(f"Module '{module_name}' has no Module subclass")
        return None

    def _load_modules_with_dependencies(self, module_names: List[str]) -> List[Module]:
        """
        Load modules with dependency resolution.

        Args:
            module_names: List of module names to load

        Returns:
            List of Module instances in dependency order

        Raises:
            ModuleDependencyError: If dependencies cannot be satisfied
        """
        modules_by_name: Dict[str, Module] = {}
        for name in module_names:
            module = self._import_module(name)
            if module is None:
                raise ModuleDependencyError(f"Module '{name}' could not be loaded")
            modules_by_name[module.name] = module

        all_modules: Dict[str, Module] = {}
        visited = set()

        def collect_dependencies(module: Module):
            """Recursively collect module and its dependencies."""
            if module.name in visited:
                return
            visited.add(module.name)

            for dep_name in module.dependencies():
                if dep_name not in modules_by_name:
                    dep_module = self._import_module(dep_name)
                    if not dep_module:
                        raise ModuleDependencyError(
                            f"Module '{module.name}' requires '{dep_name}' but it could not be loaded"
                        )
                    modules_by_name[dep_name] = dep_module

                collect_dependencies(modules_by_name[dep_name])

            all_modules[module.name] = module

        for module in list(modules_by_name.values()):
            collect_dependencies(module)

        sorted_modules = self._topological_sort(all_modules)

        for module in sorted_modules:
            logger.info(f"Loaded module: {module.name} v{module.version}")

        return sorted_modules

    def _topological_sort(self, modules: Dict[str, Module]) -> List[Module]:
        """
        Sort modules by dependencies using topological sort.

        Args:
            modules: Dict mapping module name to Module instance

        Returns:
            List of modules in dependency order (dependencies first)

        Raises:
            ModuleDependencyError: If circular dependencies detected
        """
        sorted_modules = []
        visited = set()
        temp_mark = set()

        def visit(module: Module):
            if module.name in temp_mark:
                raise ModuleDependencyError(
                    f"Circular dependency detected involving module '{module.name}'"
                )

            if module.name not in visited:
                temp_mark.add(module.name)

                for dep_name in module.dependencies():
                    if dep_name in modules:
                        visit(modules[dep_name])

                temp_mark.remove(module.name)
                visited.add(module.name)
                sorted_modules.append(module)

        for module in modules.values():
            if module.name not in visited:
                visit(module)

        return sorted_modules

    def discover_available_modules(self) -> List[Dict[str, Any]]:
        """
        Discover all available modules without registering them.

        Returns:
            List of dicts with module metadata:
            {
                'name': 'skills',
                'display_name': 'Die Skills',
                'version': '1.0.0',
                'description': '...',
                'is_core': False,
                'dependencies': ['attacks']
            }
        """
        available = []

        for name in self._discover_module_names():
            module = self._import_module(name)
            if module:
                available.append({
                    'name': module.name,
                    'display_name': module.display_name,
                    'version': module.version,
                    'description': module.description,
                    'is_core': module.is_core,
                    'dependencies': module.dependencies()
                })

        return available
