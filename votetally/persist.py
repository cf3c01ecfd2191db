'''Conversion of election objects to and from JSON-ready dictionaries.

Objects are stored as dictionaries with a ``class`` key holding the scoped
name of their class and one key per constructor parameter. Values that JSON
cannot represent directly (tuples, frozensets, enumeration members and
dictionaries with non-string keys) are wrapped in a ``type`` definition.

Only serializable classes and enumerations from the :mod:`votetally`
package and a handful of builtin types are resolved when loading, so a
state file cannot name arbitrary importable objects.
'''

import builtins
import enum
import importlib
import inspect
import sys
from typing import Any, Callable, Dict, List


PACKAGE_NAME: str = 'votetally'
BUILTIN_TYPES: List[str] = ['dict', 'tuple', 'frozenset']


def simple_serialization(class_: type) -> type:
    '''A decorator to provide a simple to_dict() serialization method.

    The resulting method serializes all object attributes named like the
    class's constructor parameters, so the class must keep its original
    parameters as attributes. A class can list the names explicitly in
    a ``serialize_params`` attribute instead.

    :param class_: The class to add the method to.
    '''
    if hasattr(class_, 'serialize_params'):
        param_names = list(class_.serialize_params)
    else:
        param_names = [
            name for name in inspect.signature(
                class_.__init__
            ).parameters.keys()
            if name not in ('self', 'args', 'kwargs')
        ]

    def to_dict(self) -> Dict[str, Any]:
        out_dict = {'class': scoped_class_name(self)}
        for attr in param_names:
            out_dict[attr] = serialize_value(getattr(self, attr))
        return out_dict

    class_.to_dict = to_dict
    return class_


def serialize_value(value: Any) -> Any:
    if hasattr(value, 'to_dict'):
        return value.to_dict()
    elif isinstance(value, enum.Enum):
        return {'type': scoped_class_name(value), 'value': value.value}
    elif isinstance(value, tuple(ATOMIC_TYPES)):
        return value
    elif type(value) in CONVERTIBLE_TYPES:
        return CONVERTIBLE_TYPES[type(value)](value)
    elif hasattr(value, 'items') and hasattr(value, 'keys'):
        if all(isinstance(key, str) for key in value.keys()):
            return {key: serialize_value(val) for key, val in value.items()}
        else:
            return {
                'type': 'dict',
                'keys': [serialize_value(key) for key in value.keys()],
                'values': [serialize_value(val) for val in value.values()]
            }
    elif isinstance(value, list):
        return [serialize_value(val) for val in value]
    else:
        raise ValueError(f'cannot serialize {value!r} to dict format')


def deserialize_value(value: Any) -> Any:
    if isinstance(value, dict):
        if 'type' in value and is_scoped_identifier(value['type']):
            return deserialize_typed(value)
        elif 'class' in value and is_scoped_identifier(value['class']):
            return deserialize_class(value)
        else:
            return {key: deserialize_value(val) for key, val in value.items()}
    elif isinstance(value, tuple(ATOMIC_TYPES)):
        return value
    elif isinstance(value, list):
        return [deserialize_value(val) for val in value]
    else:
        raise ValueError(f'cannot deserialize {value!r}, type unknown')


def deserialize_typed(typedef: Dict[str, Any]) -> Any:
    typeobj = get_object(typedef['type'])
    if typeobj is dict:
        return dict(zip(
            [deserialize_value(key) for key in typedef['keys']],
            [deserialize_value(val) for val in typedef['values']]
        ))
    elif 'value' in typedef:
        if isinstance(typeobj, enum.EnumMeta):
            return typeobj(typedef['value'])
        return typeobj(deserialize_value(typedef['value']))
    else:
        raise ValueError(f'invalid typed value contents: {typedef!r}')


def deserialize_class(clsdef: Dict[str, Any]) -> Any:
    cls = get_object(clsdef['class'])
    params = clsdef.copy()
    del params['class']
    if hasattr(cls, 'from_dict'):
        return cls.from_dict(params)
    else:
        for key, inner_val in params.items():
            params[key] = deserialize_value(inner_val)
        try:
            return cls(**params)
        except TypeError as e:
            raise ValueError(
                f'invalid parameters for {cls.__name__}: {e}'
            ) from e


def get_object(identifier: str) -> Any:
    '''Resolve a scoped name written by :func:`scoped_class_name`.

    Within the package, only serializable classes (those with a
    ``to_dict()`` method) and enumerations are resolved.

    :raises ValueError: If the name points outside the package, to an
        unknown module or object, or to anything but a serializable class,
        and is not one of the permitted builtin types.
    '''
    if '.' not in identifier:
        if identifier not in BUILTIN_TYPES:
            raise ValueError(f'builtin type {identifier} not permitted')
        return getattr(builtins, identifier)
    module, name = identifier.rsplit('.', 1)
    if module != PACKAGE_NAME and not module.startswith(PACKAGE_NAME + '.'):
        raise ValueError(f'{identifier} is outside of {PACKAGE_NAME}')
    if module not in sys.modules:
        try:
            importlib.import_module(module)
        except ImportError as e:
            raise ValueError(f'unknown module {module}') from e
    try:
        obj = getattr(sys.modules[module], name)
    except AttributeError as e:
        raise ValueError(f'unknown object {identifier}') from e
    if not is_serializable_class(obj):
        raise ValueError(f'{identifier} is not a serializable class')
    return obj


def is_serializable_class(obj: Any) -> bool:
    return isinstance(obj, type) and (
        issubclass(obj, enum.Enum) or callable(getattr(obj, 'to_dict', None))
    )


def from_dict(value: Dict[str, Any]) -> Any:
    """Recreate an object from a JSON-like dictionary.

    :param value: A dictionary created by :func:`to_dict`.
    """
    if not isinstance(value, dict):
        raise ValueError('invalid votetally object def: dict expected,'
                         f' got {value!r}')
    elif 'class' not in value:
        raise ValueError('invalid votetally object def: must have a class key')
    elif not is_scoped_identifier(value['class']):
        inval_cls = value['class']
        raise ValueError(f'invalid votetally class def: {inval_cls}')
    else:
        return deserialize_value(value)


def to_dict(obj: Any) -> Dict[str, Any]:
    """Serialize an election object to a JSON-ready dictionary.

    :param obj: An object providing a `to_dict()` method, such as an
        election, a candidate or a notification.
    """
    return serialize_value(obj)


def is_scoped_identifier(value: Any) -> bool:
    return (
        isinstance(value, str)
        and not value.startswith('.')
        and all(chunk.isidentifier() for chunk in value.split('.'))
    )


def scoped_class_name(value: Any) -> str:
    cls = value.__class__
    return '.'.join((cls.__module__, cls.__name__))


def sequence_to_json_factory(typeobj: type) -> Callable[[Any], Dict[str, Any]]:
    typename = typeobj.__name__

    def sequence_to_json(seq) -> Dict[str, Any]:
        return {'type': typename, 'value': [serialize_value(v) for v in seq]}

    return sequence_to_json


ATOMIC_TYPES: List[type] = [
    str, int, float, bool, type(None),
]

CONVERTIBLE_TYPES: Dict[type, Callable] = {}

SEQUENCE_TYPES: List[type] = [frozenset, tuple]

for seqtype in SEQUENCE_TYPES:
    CONVERTIBLE_TYPES[seqtype] = sequence_to_json_factory(seqtype)
