"""Minimal namespace-aware DOM used by the sanitizer.

Node kinds:
- Document: root container, owns every node created through it.
- Element: tag name (qualified, as written), element namespace, ordered attributes.
- Text, Comment, ProcessingInstruction: character data in `data`.
"""

from __future__ import annotations

from collections.abc import Iterator

from .namespaces import DEFAULT_REGISTRY, NS

ELEMENT_NODE = 1
TEXT_NODE = 3
PROCESSING_INSTRUCTION_NODE = 7
COMMENT_NODE = 8
DOCUMENT_NODE = 9


def split_qname(qname: str) -> tuple[str | None, str]:
    if ":" in qname:
        prefix, local = qname.split(":", 1)
        if prefix and local:
            return prefix, local
    return None, qname


def _default_namespace_for(qname: str) -> str | None:
    """Namespace implied by a qualified attribute name written in markup."""
    if qname == "xmlns":
        return NS.XMLNS
    prefix, _ = split_qname(qname)
    if prefix is None:
        return None
    return DEFAULT_REGISTRY.lookup(prefix)


class Attr:
    __slots__ = ("local_name", "namespace", "prefix", "value")

    def __init__(self, local_name: str, value: str, namespace: str | None = None, prefix: str | None = None):
        self.local_name = local_name
        self.value = value
        self.namespace = namespace
        self.prefix = prefix

    @property
    def name(self) -> str:
        """Qualified name (`prefix:local` or just `local`)."""
        if self.prefix:
            return f"{self.prefix}:{self.local_name}"
        return self.local_name

    def __repr__(self) -> str:
        return f"Attr({self.name!r}={self.value!r}, namespace={self.namespace!r})"


class Node:
    """Base tree node.

    - name: tag name for elements, '#text', '#comment', '#document', ...
    - children: list of child Nodes (always empty for character data)
    - parent: parent Node, or None when detached
    - owner_document: the Document this node belongs to, if any
    """

    __slots__ = ("children", "name", "owner_document", "parent")

    node_type = 0

    def __init__(self, name: str, owner_document: Document | None = None):
        if not name:
            msg = "Empty name passed to Node constructor"
            raise ValueError(msg)
        self.name = name
        self.children: list[Node] = []
        self.parent: Node | None = None
        self.owner_document = owner_document

    @property
    def first_child(self) -> Node | None:
        return self.children[0] if self.children else None

    def has_child_nodes(self) -> bool:
        return bool(self.children)

    def _would_create_cycle(self, child: Node) -> bool:
        current: Node | None = self
        while current is not None:
            if current is child:
                return True
            current = current.parent
        return False

    def _detach(self, child: Node) -> None:
        if child.parent is not None:
            child.parent.children.remove(child)
            child.parent = None

    def _adopt(self, child: Node) -> None:
        document = self if isinstance(self, Document) else self.owner_document
        if document is None or child.owner_document is document:
            return
        for node in child.iter():
            node.owner_document = document

    def append_child(self, child: Node) -> Node:
        if self._would_create_cycle(child):
            msg = f"Adding {child.name} as child of {self.name} would create circular reference"
            raise ValueError(msg)
        self._detach(child)
        child.parent = self
        self.children.append(child)
        self._adopt(child)
        return child

    def insert_before(self, new_node: Node, reference_node: Node | None) -> Node:
        """Insert `new_node` before `reference_node` (append if None); return `new_node`."""
        if reference_node is None:
            return self.append_child(new_node)
        if reference_node.parent is not self:
            msg = f"{reference_node.name} is not a child of {self.name}"
            raise ValueError(msg)
        if new_node is reference_node:
            return new_node
        if self._would_create_cycle(new_node):
            msg = f"Inserting {new_node.name} into {self.name} would create circular reference"
            raise ValueError(msg)
        self._detach(new_node)
        idx = self.children.index(reference_node)
        new_node.parent = self
        self.children.insert(idx, new_node)
        self._adopt(new_node)
        return new_node

    def remove_child(self, child: Node) -> Node:
        if child.parent is not self:
            msg = f"{child.name} is not a child of {self.name}"
            raise ValueError(msg)
        self._detach(child)
        return child

    def remove(self) -> None:
        """Detach this node from its parent; a no-op when already detached."""
        if self.parent is not None:
            self.parent.remove_child(self)

    def iter(self) -> Iterator[Node]:
        """Yield this node and its descendants in document order."""
        stack: list[Node] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def iter_elements(self) -> Iterator[Element]:
        for node in self.iter():
            if isinstance(node, Element):
                yield node


class Document(Node):
    __slots__ = ()

    node_type = DOCUMENT_NODE

    def __init__(self) -> None:
        super().__init__("#document")

    @property
    def document_element(self) -> Element | None:
        for child in self.children:
            if isinstance(child, Element):
                return child
        return None

    def create_element(self, name: str, namespace: str | None = None, attrs: dict[str, str] | None = None) -> Element:
        return Element(name, attrs, namespace=namespace, owner_document=self)

    def create_element_ns(self, namespace: str | None, qname: str) -> Element:
        return Element(qname, namespace=namespace, owner_document=self)

    def create_text_node(self, data: str) -> Text:
        return Text(data, owner_document=self)

    def create_comment(self, data: str) -> Comment:
        return Comment(data, owner_document=self)

    def __repr__(self) -> str:
        return f"Document(children={len(self.children)})"


class Element(Node):
    __slots__ = ("attributes", "namespace")

    node_type = ELEMENT_NODE

    def __init__(
        self,
        name: str,
        attrs: dict[str, str] | None = None,
        *,
        namespace: str | None = None,
        owner_document: Document | None = None,
    ):
        super().__init__(name, owner_document)
        self.namespace = namespace
        self.attributes: list[Attr] = []
        if attrs:
            for key, value in attrs.items():
                attr_ns = _default_namespace_for(key)
                if attr_ns is None:
                    self.set_attribute(key, value)
                else:
                    self.set_attribute_ns(attr_ns, key, value)

    @property
    def prefix(self) -> str | None:
        return split_qname(self.name)[0]

    @property
    def local_name(self) -> str:
        return split_qname(self.name)[1]

    @property
    def attrs(self) -> dict[str, str]:
        """Snapshot of attributes keyed by qualified name."""
        return {attr.name: attr.value for attr in self.attributes}

    def _find(self, name: str) -> Attr | None:
        for attr in self.attributes:
            if attr.name == name:
                return attr
        return None

    def _find_ns(self, namespace: str | None, local_name: str) -> Attr | None:
        for attr in self.attributes:
            if attr.namespace == namespace and attr.local_name == local_name:
                return attr
        return None

    def has_attribute(self, name: str) -> bool:
        return self._find(name) is not None

    def get_attribute(self, name: str) -> str | None:
        attr = self._find(name)
        return attr.value if attr is not None else None

    def get_attribute_ns(self, namespace: str | None, local_name: str) -> str | None:
        attr = self._find_ns(namespace, local_name)
        return attr.value if attr is not None else None

    def set_attribute(self, name: str, value: str) -> None:
        """Set by qualified name; new attributes are created in no namespace."""
        attr = self._find(name)
        if attr is not None:
            attr.value = value
            return
        self.attributes.append(Attr(name, value))

    def set_attribute_ns(self, namespace: str | None, qname: str, value: str) -> None:
        prefix, local = split_qname(qname)
        attr = self._find_ns(namespace, local)
        if attr is not None:
            attr.prefix = prefix
            attr.value = value
            return
        self.attributes.append(Attr(local, value, namespace=namespace, prefix=prefix))

    def remove_attribute(self, name: str) -> None:
        attr = self._find(name)
        if attr is not None:
            self.attributes.remove(attr)

    def remove_attribute_ns(self, namespace: str | None, local_name: str) -> None:
        attr = self._find_ns(namespace, local_name)
        if attr is not None:
            self.attributes.remove(attr)

    def __repr__(self) -> str:
        return f"Element(<{self.name}>, children={len(self.children)})"


class CharacterData(Node):
    __slots__ = ("data",)

    def __init__(self, name: str, data: str, owner_document: Document | None = None):
        super().__init__(name, owner_document)
        self.data = data

    def append_child(self, child: Node) -> Node:
        msg = f"{self.name} nodes cannot have children"
        raise ValueError(msg)

    def insert_before(self, new_node: Node, reference_node: Node | None) -> Node:
        msg = f"{self.name} nodes cannot have children"
        raise ValueError(msg)

    def __repr__(self) -> str:
        return f"Node({self.name}={self.data[:30]!r})"


class Text(CharacterData):
    __slots__ = ()

    node_type = TEXT_NODE

    def __init__(self, data: str, owner_document: Document | None = None):
        super().__init__("#text", data, owner_document)


class Comment(CharacterData):
    __slots__ = ()

    node_type = COMMENT_NODE

    def __init__(self, data: str, owner_document: Document | None = None):
        super().__init__("#comment", data, owner_document)


class ProcessingInstruction(CharacterData):
    __slots__ = ("target",)

    node_type = PROCESSING_INSTRUCTION_NODE

    def __init__(self, target: str, data: str, owner_document: Document | None = None):
        super().__init__("#processing-instruction", data, owner_document)
        self.target = target
