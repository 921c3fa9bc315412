"""Identifier deconstruction and casing.

Every name the generator produces (types, properties, commands, parameters)
is built by splitting a source identifier into lower-case words with
``deconstruct`` and recomposing them with one of the casing functions.

Examples:
    deconstruct('HTTPServerName')      -> ['http', 'server', 'name']
    deconstruct('resource_group-name') -> ['resource', 'group', 'name']
    pascal_case(['http', 'server'])    -> 'HttpServer'
    split_verb_noun('Widgets_List')    -> ('List', 'Widgets')
"""

from __future__ import annotations

import re
import unicodedata
from collections.abc import Container, Sequence

__all__ = [
    'camel',
    'camel_case',
    'deconstruct',
    'derive_operation_id',
    'kebab_case',
    'pascal',
    'pascal_case',
    'sanitize_identifier',
    'snake_case',
    'split_verb_noun',
    'unique_name',
]

# Acronym runs stop before a capitalised word: HTTPServer -> HTTP, Server.
_WORD = re.compile(
    r'[A-Z]+[0-9]*(?=[A-Z][a-z])'
    r'|[A-Z]?[a-z]+[0-9]*'
    r'|[A-Z]+[0-9]*'
    r'|[0-9]+[a-z]*'
)
_SEPARATORS = re.compile(r'[^A-Za-z0-9]+')

_VERB_ALIASES: dict[str, str] = {
    'create': 'New',
    'delete': 'Remove',
    'patch': 'Update',
}

_METHOD_VERBS: dict[str, str] = {
    'get': 'list',
    'post': 'create',
    'put': 'update',
    'patch': 'update',
    'delete': 'delete',
}


def _remove_accents(text: str) -> str:
    nfkd_form = unicodedata.normalize('NFKD', text)
    return ''.join(c for c in nfkd_form if not unicodedata.combining(c))


def deconstruct(identifier: str) -> list[str]:
    """Split an identifier into lower-case word tokens.

    Handles camelCase, PascalCase, snake_case, kebab-case, acronym runs and
    digits attached to words. Any other character is a separator and is
    dropped. An empty identifier yields an empty list.
    """
    if not identifier:
        return []
    tokens: list[str] = []
    for chunk in _SEPARATORS.split(_remove_accents(identifier)):
        tokens.extend(word.lower() for word in _WORD.findall(chunk))
    return tokens


def _capitalize(token: str) -> str:
    return token[:1].upper() + token[1:]


def pascal_case(tokens: Sequence[str]) -> str:
    return ''.join(_capitalize(token) for token in tokens)


def camel_case(tokens: Sequence[str]) -> str:
    if not tokens:
        return ''
    return tokens[0] + pascal_case(tokens[1:])


def snake_case(tokens: Sequence[str]) -> str:
    return '_'.join(tokens)


def kebab_case(tokens: Sequence[str]) -> str:
    return '-'.join(tokens)


def pascal(identifier: str) -> str:
    return pascal_case(deconstruct(identifier))


def camel(identifier: str) -> str:
    return camel_case(deconstruct(identifier))


def sanitize_identifier(name: str) -> str:
    """PascalCase a name and make sure it is a valid identifier.

    Returns 'UnnamedType' when nothing usable is left.
    """
    sanitized = pascal(name)
    if sanitized and sanitized[0].isdigit():
        sanitized = '_' + sanitized
    return sanitized or 'UnnamedType'


def unique_name(name: str, taken: Container[str]) -> str:
    """Return ``name`` or the first free ``name1``, ``name2``, ... variant."""
    if name not in taken:
        return name
    counter = 1
    while f'{name}{counter}' in taken:
        counter += 1
    return f'{name}{counter}'


def derive_operation_id(method: str, path: str) -> str:
    """Build an operation id for an operation that does not declare one.

    GET on a collection lists, GET on an item gets; other methods map to
    create/update/delete. Path parameters are dropped from the noun.

    Examples:
        GET    /widgets            -> listWidgets
        GET    /widgets/{id}       -> getWidgets
        POST   /widgets            -> createWidgets
        DELETE /shops/{id}/widgets -> deleteShopsWidgets
    """
    method = method.lower()
    segments = [s for s in path.split('/') if s]
    words = [s for s in segments if not s.startswith('{')]
    if method == 'get':
        verb = 'get' if segments and segments[-1].startswith('{') else 'list'
    else:
        verb = _METHOD_VERBS.get(method, method)
    tokens = [verb]
    for word in words:
        tokens.extend(deconstruct(word))
    if len(tokens) == 1:
        tokens.append('root')
    return camel_case(tokens)


def split_verb_noun(operation_id: str) -> tuple[str, str]:
    """Derive a (Verb, Noun) pair from an operation id.

    ``Group_Action`` ids (capitalised group) take the verb from the action
    and the noun from the group followed by the rest of the action. Other ids
    use their first word as the verb. One-word ids are invoked.
    """
    group, separator, action = operation_id.strip('_').partition('_')
    if separator and action and group[:1].isupper():
        action_tokens = deconstruct(action)
        verb_tokens = action_tokens[:1]
        noun_tokens = deconstruct(group) + action_tokens[1:]
    else:
        tokens = deconstruct(operation_id)
        verb_tokens, noun_tokens = tokens[:1], tokens[1:]

    if not noun_tokens:
        return 'Invoke', pascal_case(verb_tokens)

    verb = verb_tokens[0] if verb_tokens else 'invoke'
    return _VERB_ALIASES.get(verb, _capitalize(verb)), pascal_case(noun_tokens)
