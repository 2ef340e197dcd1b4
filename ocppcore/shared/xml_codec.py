"""
The XML binding (OCPP-S, i.e. the SOAP body) of the message codec.

The root element of a message is named after the operation, e.g.
authorizeRequest, and lives in the namespace of the operation. Each payload
field becomes a child element named after the field's alias, a list becomes
a sequence of repeated elements and a nested model a nested element.

The SOAP binding has no place for signatures and custom data: both are
dropped when serialising and are never present after parsing. Elements not
known to the payload model are ignored.
"""
import xml.etree.ElementTree as ET
from typing import Any, Dict, Iterable, List, Optional, Tuple, Type, Union

from typing_extensions import Annotated, get_args, get_origin

from ocppcore.shared.exceptions import InvalidTreeError, UnsupportedFormatError
from ocppcore.shared.imessage_codec import MessageCodec, MessageCustomizer
from ocppcore.shared.messages import BaseModel
from ocppcore.shared.messages.datatypes import CustomData, Signature
from ocppcore.shared.messages.enums import WireFormat
from ocppcore.shared.messages.envelope import Operation, ReqP, ResP
from ocppcore.shared.settings import SettingKey

# xsi:nil="true" marks an element that is present but has no value
XSI_NIL = "{http://www.w3.org/2001/XMLSchema-instance}nil"


def _unwrap_annotation(annotation: Any) -> Tuple[Any, bool]:
    """
    Returns the type of the element(s) a field annotation stands for and
    whether the field holds a list of them, e.g.
    Optional[List[AuthorizationData]] -> (AuthorizationData, True)
    """
    origin = get_origin(annotation)
    if origin is Annotated:
        return _unwrap_annotation(get_args(annotation)[0])
    if origin is Union:
        args = [arg for arg in get_args(annotation) if arg is not type(None)]
        if len(args) == 1:
            return _unwrap_annotation(args[0])
        return annotation, False
    if origin in (list, List, tuple):
        item_type, _ = _unwrap_annotation(get_args(annotation)[0])
        return item_type, True
    return annotation, False


def _is_model(annotation: Any) -> bool:
    return isinstance(annotation, type) and issubclass(annotation, BaseModel)


def _is_nil(element: ET.Element, is_model: bool) -> bool:
    if element.get(XSI_NIL, "").strip() in ("true", "1"):
        return True
    # <data/> carries no value, an empty nested element may still be a model
    return not is_model and element.text is None and len(element) == 0


def _to_text(value: Any) -> str:
    # xs:boolean
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class XMLCodec(MessageCodec[ReqP, ResP, ET.Element]):
    wire_format = WireFormat.XML
    log_setting = SettingKey.MESSAGE_LOG_XML

    def __init__(
        self,
        operation: Operation[ReqP, ResP],
        request_customizer: Optional[MessageCustomizer] = None,
        response_customizer: Optional[MessageCustomizer] = None,
    ):
        if operation.namespace is None:
            raise UnsupportedFormatError(str(operation), self.wire_format.value)
        super().__init__(operation, request_customizer, response_customizer)
        self.namespace = operation.namespace.value

    def qualified_name(self, name: str) -> str:
        """The ElementTree name of an element in the operation's namespace"""
        return f"{{{self.namespace}}}{name}"

    def _read(
        self, tree: ET.Element, payload_type: Type[BaseModel], element: str
    ) -> Tuple[BaseModel, Tuple[Signature, ...], Optional[CustomData]]:
        if not isinstance(tree, ET.Element):
            raise InvalidTreeError(
                f"Expected an XML element, got {type(tree).__name__}"
            )
        expected = self.qualified_name(element)
        if tree.tag != expected:
            raise InvalidTreeError(
                f"Unexpected root element {tree.tag}, expected {expected}"
            )
        payload = payload_type.model_validate(
            self._element_to_dict(tree, payload_type)
        )
        return payload, (), None

    def _element_to_dict(
        self, element: ET.Element, model_type: Type[BaseModel]
    ) -> Dict[str, Any]:
        """
        Collects the child elements known to the model into a dict keyed by
        wire name, so that the model can be validated the same way as from a
        JSON object. Text is left to pydantic to convert. Empty or nil
        elements of optional fields are treated as absent.
        """
        values: Dict[str, Any] = {}
        for name, field in model_type.model_fields.items():
            alias = field.alias or name
            children = element.findall(self.qualified_name(alias))
            item_type, is_list = _unwrap_annotation(field.annotation)
            if not field.is_required():
                # An empty optional element is the same as an absent one
                children = [
                    child
                    for child in children
                    if not _is_nil(child, _is_model(item_type))
                ]
            if not children:
                continue

            if is_list:
                values[alias] = [
                    self._element_value(child, item_type) for child in children
                ]
            else:
                values[alias] = self._element_value(children[0], item_type)
        return values

    def _element_value(self, element: ET.Element, item_type: Any) -> Any:
        if _is_model(item_type):
            return self._element_to_dict(element, item_type)
        return element.text or ""

    def _write(
        self,
        element: str,
        payload: BaseModel,
        signatures: Iterable[Signature],
        custom_data: Optional[CustomData],
    ) -> ET.Element:
        root = ET.Element(self.qualified_name(element))
        self._append_children(
            root, payload.model_dump(mode="json", by_alias=True, exclude_none=True)
        )
        return root

    def _append_children(self, parent: ET.Element, values: Dict[str, Any]):
        for name, value in values.items():
            items = value if isinstance(value, list) else [value]
            for item in items:
                child = ET.SubElement(parent, self.qualified_name(name))
                if isinstance(item, dict):
                    self._append_children(child, item)
                else:
                    child.text = _to_text(item)

    def _canonical_bytes(self, tree: ET.Element) -> bytes:
        # W3C Canonical XML 2.0
        return ET.canonicalize(ET.tostring(tree, encoding="unicode")).encode("utf-8")

    def _dump(self, tree: ET.Element) -> str:
        if not isinstance(tree, ET.Element):
            return repr(tree)
        return ET.tostring(tree, encoding="unicode")
