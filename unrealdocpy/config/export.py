"""Per-entity export predicate."""

from unrealdocpy.config.settings import ExportSettings
from unrealdocpy.document import Delegate, Enum, Function, Property, StructClass, Visibility


def can_export(entity: Enum | StructClass | Property | Function | Delegate, settings: ExportSettings) -> bool:
    """Whether a parsed entity is kept in the Document.

    Every entity needs `show_all` or its own doc comments. Members also need a
    visibility the settings allow: public always, protected and private only
    when the matching `document_*` flag is set.
    """
    if not settings.show_all and entity.doc_comments is None:
        return False

    match entity:
        case Property(visibility=visibility) | Function(visibility=visibility):
            return _visibility_allowed(visibility, settings)
        case _:
            return True


def _visibility_allowed(visibility: Visibility, settings: ExportSettings) -> bool:
    match visibility:
        case Visibility.PUBLIC:
            return True
        case Visibility.PROTECTED:
            return settings.document_protected
        case Visibility.PRIVATE:
            return settings.document_private
