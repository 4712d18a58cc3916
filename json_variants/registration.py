from .group import TypeGroup
from .serializer import PolymorphicSerializer

import logging

logger = logging.getLogger(__name__)


class Registration:
    """
    Collects type groups at process start and builds the shared serializers::

        services = (
            Registration()
            .register_type_group(shapes)
            .register_type_group(geometry_module)
            .register_serializer_facade()
            .build()
        )
        shapes = services.typed(Shape)

    Descriptors are materialized as they're registered, so a bad descriptor fails here
    rather than on first use.
    """

    def __init__(self):
        self.groups = []
        self.with_facade = False

    def register_type_group(self, descriptor):
        group = TypeGroup.from_descriptor(descriptor)
        logger.debug("registered %r", group)
        self.groups.append(group)
        return self

    def register_serializer_facade(self):
        self.with_facade = True
        return self

    def build(self):
        return Services(self.groups, with_facade=self.with_facade)


class Services:
    """
    The built registrations: one shared PolymorphicSerializer, and through it one
    TypedSerializer per base type.
    """

    def __init__(self, groups, with_facade):
        self.groups = tuple(groups)
        self._serializer = PolymorphicSerializer(self.groups) if with_facade else None

    @property
    def serializer(self):
        if self._serializer is None:
            raise LookupError(
                "No serializer facade registered; call register_serializer_facade()"
            )
        return self._serializer

    def typed(self, base):
        return self.serializer.typed(base)
