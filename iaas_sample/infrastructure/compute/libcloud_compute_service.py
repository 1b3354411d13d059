"""libcloud implementation of the compute-service port."""
import inspect
import re
import uuid
from functools import wraps
from typing import Any, Callable, Dict, List, Mapping, Optional, TypeVar

import requests
from libcloud.common.exceptions import BaseHTTPError
from libcloud.common.types import InvalidCredsError
from libcloud.compute.base import Node, NodeDriver
from libcloud.compute.providers import get_driver
from libcloud.compute.types import NodeState

from iaas_sample.domain.base.ports import ComputeServicePort
from iaas_sample.domain.compute import (
    Credentials,
    HardwareProfile,
    Image,
    InstanceDescriptor,
    Location,
    OsFamily,
    PAYLOAD_KEY,
    Template,
)
from iaas_sample.domain.core.exceptions import DomainException, InstanceNotFoundError
from iaas_sample.infrastructure.compute import mappers
from iaas_sample.infrastructure.exceptions import (
    ProviderAuthenticationError,
    ProviderConnectionError,
    ProviderError,
    ProviderTimeoutError,
    TemplateResolutionError,
)
from iaas_sample.infrastructure.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

DEFAULT_PROVIDER = "ec2"
DEFAULT_TIMEOUT_SECONDS = 60

_NOT_FOUND_PATTERN = re.compile(r"not\s*found|does not exist|no such", re.IGNORECASE)


def provider_operation(operation: str) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """
    Translate collaborator failures into the provider error taxonomy.

    Domain exceptions and already translated provider errors pass through.
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            try:
                return func(*args, **kwargs)
            except (DomainException, ProviderError):
                raise
            except InvalidCredsError as e:
                raise ProviderAuthenticationError(operation, f"invalid credentials: {e}", details=e) from e
            except (TimeoutError, requests.exceptions.Timeout) as e:
                raise ProviderTimeoutError(operation, f"request timed out: {e}", details=e) from e
            except Exception as e:
                raise ProviderError(operation, str(e), details=e) from e

        return wrapper

    return decorator


class LibcloudComputeService(ComputeServicePort):
    """Compute service backed by a libcloud node driver."""

    def __init__(self, driver: NodeDriver, provider: str = DEFAULT_PROVIDER):
        self._driver = driver
        self.provider = provider

    @classmethod
    def connect(
        cls,
        credentials: Credentials,
        provider: str = DEFAULT_PROVIDER,
        timeout: int = DEFAULT_TIMEOUT_SECONDS,
        overrides: Optional[Mapping[str, Any]] = None,
        driver_factory: Callable[[str], type] = get_driver,
    ) -> "LibcloudComputeService":
        """
        Resolve the driver for ``provider`` and instantiate it.

        Args:
            credentials: Provider identity and secret
            provider: libcloud compute provider name
            timeout: Per-request timeout in seconds
            overrides: Extra driver constructor arguments (region, host...)
            driver_factory: Resolves a provider name to a driver class

        Raises:
            ProviderConnectionError: If the driver cannot be resolved or built
        """
        logger.info("Creating compute service", provider=provider)

        try:
            driver_cls = driver_factory(provider)
        except Exception as e:
            raise ProviderConnectionError(f"Unknown compute provider '{provider}': {e}", details=e) from e

        driver_kwargs: Dict[str, Any] = dict(overrides or {})
        driver_kwargs.setdefault("timeout", timeout)

        try:
            driver = driver_cls(credentials.identity, credentials.secret, **driver_kwargs)
        except InvalidCredsError as e:
            raise ProviderConnectionError(f"Provider rejected credentials: {e}", details=e) from e
        except Exception as e:
            raise ProviderConnectionError(
                f"Failed to initialize compute service for '{provider}': {e}", details=e
            ) from e

        return cls(driver, provider=provider)

    @provider_operation("list_assignable_locations")
    def list_assignable_locations(self) -> List[Location]:
        return [mappers.to_location(loc) for loc in self._driver.list_locations()]

    @provider_operation("list_hardware_profiles")
    def list_hardware_profiles(self) -> List[HardwareProfile]:
        return [mappers.to_hardware_profile(size) for size in self._driver.list_sizes()]

    @provider_operation("list_images")
    def list_images(self) -> List[Image]:
        return [mappers.to_image(image) for image in self._driver.list_images()]

    @provider_operation("list_nodes")
    def list_nodes(self) -> List[InstanceDescriptor]:
        return [mappers.to_instance(node) for node in self._driver.list_nodes()]

    @provider_operation("create_nodes_in_group")
    def create_nodes_in_group(
        self, group: str, count: int, template: Template
    ) -> List[InstanceDescriptor]:
        if count < 1:
            raise ProviderError("create_nodes_in_group", f"count must be at least 1, got {count}")

        logger.info("Building template", image_id=template.image_id,
                    location_id=template.location_id, hardware_id=template.hardware_id)
        image = self._resolve_image(template.image_id)
        size = self._resolve(self._driver.list_sizes(), template.hardware_id, "hardware")
        location = self._resolve(self._driver.list_locations(), template.location_id, "location")
        self._check_operating_system(image, template)

        create_kwargs = self._build_create_kwargs(group, template)
        names = self._node_names(group, count, template)

        created = []
        for name in names:
            node = self._driver.create_node(
                name=name, size=size, image=image, location=location, **create_kwargs
            )
            instance = mappers.to_instance(node, group=group)
            logger.info("Instance created", instance_id=instance.id, name=instance.name)
            created.append(instance)
        return created

    @provider_operation("destroy_node")
    def destroy_node(self, instance_id: str) -> None:
        node = Node(
            id=instance_id,
            name=None,
            state=NodeState.UNKNOWN,
            public_ips=[],
            private_ips=[],
            driver=self._driver,
        )
        try:
            destroyed = self._driver.destroy_node(node)
        except BaseHTTPError as e:
            if e.code == 404:
                raise InstanceNotFoundError(instance_id, details=str(e)) from e
            raise
        except Exception as e:
            if _NOT_FOUND_PATTERN.search(str(e)):
                raise InstanceNotFoundError(instance_id, details=str(e)) from e
            raise

        if destroyed is False:
            raise ProviderError("destroy_node", f"provider did not destroy instance {instance_id}")

    def _resolve_image(self, image_id: str) -> Any:
        get_image = getattr(self._driver, "get_image", None)
        if get_image is not None:
            try:
                return get_image(image_id)
            except NotImplementedError:
                pass
        return self._resolve(self._driver.list_images(), image_id, "image")

    @staticmethod
    def _resolve(candidates: List[Any], resource_id: str, kind: str) -> Any:
        """Match on id first, then on name."""
        for candidate in candidates:
            if str(candidate.id) == resource_id:
                return candidate
        for candidate in candidates:
            if candidate.name == resource_id:
                return candidate
        raise TemplateResolutionError("build_template", f"no {kind} with id '{resource_id}'")

    @staticmethod
    def _check_operating_system(image: Any, template: Template) -> None:
        image_os = mappers.to_image(image).operating_system
        wanted = template.os_family
        if (
            wanted is not OsFamily.UNRECOGNIZED
            and image_os.family is not OsFamily.UNRECOGNIZED
            and image_os.family is not wanted
        ):
            raise TemplateResolutionError(
                "build_template",
                f"image '{image.id}' is {image_os.family.value}, not {wanted.value}",
            )
        if image_os.family is OsFamily.UNRECOGNIZED:
            logger.warning("Could not determine image OS family", image_id=str(image.id))

        pattern = template.os_version_pattern
        if pattern:
            haystacks = [image_os.version or "", image_os.description or ""]
            if not any(re.search(pattern, text) for text in haystacks):
                logger.warning(
                    "Image OS version does not match requested version",
                    image_id=str(image.id),
                    requested=pattern,
                    found=image_os.version,
                )

    def _build_create_kwargs(self, group: str, template: Template) -> Dict[str, Any]:
        """Express template options as the ``ex_*`` arguments the driver accepts."""
        options = template.options
        candidates: Dict[str, Any] = {
            "ex_domain": options.domain_name,
            "ex_metadata": dict(options.user_metadata) or None,
            "ex_userdata": options.user_metadata.get(PAYLOAD_KEY),
            "ex_inbound_ports": list(options.inbound_ports) or None,
        }

        try:
            accepted = inspect.signature(self._driver.create_node).parameters
        except (TypeError, ValueError):
            accepted = {}

        if "ex_tags" in accepted:
            candidates["ex_tags"] = _tags_argument(accepted["ex_tags"], group)

        kwargs = {}
        for key, value in candidates.items():
            if value is None:
                continue
            if key in accepted:
                kwargs[key] = value
            else:
                logger.debug("Driver does not support template option", option=key,
                             provider=self.provider)
        return kwargs

    @staticmethod
    def _node_names(group: str, count: int, template: Template) -> List[str]:
        names = list(template.options.node_names[:count])
        while len(names) < count:
            names.append(f"{group}-{uuid.uuid4().hex[:8]}")
        return names


def _tags_argument(parameter: inspect.Parameter, group: str) -> Any:
    """Most drivers take ``ex_tags`` as a list of strings; a few take a mapping."""
    if isinstance(parameter.default, dict) or "dict" in str(parameter.annotation).lower():
        return {"group": group}
    return [group]
