#!/usr/bin/env python3
"""
KUBEDECK RESOLVER - Resource Identification
-------------------------------------------
Turns raw document text (YAML or JSON, single or multi-document) into the
ordered list of (kind, name, namespace) identifiers it declares.

Failure kinds are kept distinct because each one changes what the user is
told to do next:
1. ResourceParseError     - the text is not well-formed
2. NotAResourceError      - the text parsed but is not a Kubernetes resource
3. MultipleResourcesError - one resource was required, several were found

Author: KubeDeck Team
Date: 2026-10-18
"""

import json
import logging
from typing import Any, List, Optional

from ruamel.yaml import YAML, YAMLError

from kubedeck.core.errors import (
    MultipleResourcesError,
    NoEditorError,
    NotAResourceError,
    ResourceParseError,
)
from kubedeck.core.models import ResourceIdentifier
from kubedeck.editor.document import Editor

logger = logging.getLogger("kubedeck.resolver")

NOT_A_RESOURCE = "the open document is not a Kubernetes resource"
CONTAINS_NON_RESOURCE = "the open document contains an item which is not a Kubernetes resource"
MULTIPLE_RESOURCES = "the open document contains multiple Kubernetes resources"


def is_kubernetes_resource(obj: Any) -> bool:
    """A mapping with a `kind` and a `metadata.name`."""
    if not isinstance(obj, dict):
        return False
    kind = obj.get("kind")
    metadata = obj.get("metadata")
    if not isinstance(kind, str) or not kind:
        return False
    if not isinstance(metadata, dict):
        return False
    name = metadata.get("name")
    return isinstance(name, str) and bool(name)


class KubeResolver:
    """
    Parses documents with ruamel.yaml in safe mode. JSON bodies are tried
    with the json module first since tab-indented JSON is not valid YAML.
    """

    def __init__(self):
        self.yaml = YAML(typ='safe')

    def parse_documents(self, text: str) -> List[Any]:
        stripped = text.strip()
        if stripped.startswith("{"):
            try:
                return [json.loads(stripped)]
            except json.JSONDecodeError:
                logger.debug("Document looks like JSON but is not; retrying as YAML")

        try:
            docs = list(self.yaml.load_all(text))
        except YAMLError as e:
            raise ResourceParseError(f"the open document could not be parsed: {e}")

        # Empty documents, e.g. a trailing '---', carry nothing
        return [doc for doc in docs if doc is not None]

    def find_identifiers(self, text: str) -> List[ResourceIdentifier]:
        """Every resource in the document, in document order."""
        objs = self.parse_documents(text)

        if any(not is_kubernetes_resource(obj) for obj in objs):
            if len(objs) == 1:
                raise NotAResourceError(NOT_A_RESOURCE)
            raise NotAResourceError(CONTAINS_NON_RESOURCE)

        return [
            ResourceIdentifier(
                kind=obj["kind"].lower(),
                resource_name=obj["metadata"]["name"],
                namespace=obj["metadata"].get("namespace"),
            )
            for obj in objs
        ]

    def find_identifier(self, text: str) -> ResourceIdentifier:
        """Exactly one resource, or a typed failure."""
        identifiers = self.find_identifiers(text)
        if len(identifiers) > 1:
            raise MultipleResourcesError(MULTIPLE_RESOURCES)
        if not identifiers:
            raise NotAResourceError(NOT_A_RESOURCE)
        return identifiers[0]

    def find_identifier_in_editor(self, editor: Optional[Editor]) -> ResourceIdentifier:
        if editor is None:
            raise NoEditorError("No open editor")
        return self.find_identifier(editor.document.text)
