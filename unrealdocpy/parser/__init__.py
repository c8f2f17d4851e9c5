"""Parser infrastructure (token source + event-based parser + tree sink)."""

from unrealdocpy.parser.event import (
    Event,
    FinishEvent,
    StartEvent,
    TokenEvent,
    process_events,
)
from unrealdocpy.parser.grammar import DELEGATE_MACRO, parse_element_fragment_root, parse_file
from unrealdocpy.parser.header import build_lossless_tree, parse_element_fragment, parse_header, parse_result
from unrealdocpy.parser.marker import CompletedMarker, Marker
from unrealdocpy.parser.options import ParseMode, ParserOptions
from unrealdocpy.parser.parse_lists import ParseNodeList
from unrealdocpy.parser.parse_recovery import ParseRecoveryTokenSet, RecoveryError
from unrealdocpy.parser.parsed_syntax import ParsedSyntax
from unrealdocpy.parser.parser import Parser, ParserCheckpoint, ParserProgress
from unrealdocpy.parser.token_source import TokenSource, TokenSourceCheckpoint
from unrealdocpy.parser.tree_sink import LosslessTreeSink, ParsedGreenTree

__all__ = [
    "DELEGATE_MACRO",
    "CompletedMarker",
    "Event",
    "FinishEvent",
    "LosslessTreeSink",
    "Marker",
    "ParseMode",
    "ParseNodeList",
    "ParseRecoveryTokenSet",
    "ParsedGreenTree",
    "ParsedSyntax",
    "Parser",
    "ParserCheckpoint",
    "ParserOptions",
    "ParserProgress",
    "RecoveryError",
    "StartEvent",
    "TokenEvent",
    "TokenSource",
    "TokenSourceCheckpoint",
    "build_lossless_tree",
    "parse_element_fragment",
    "parse_element_fragment_root",
    "parse_file",
    "parse_header",
    "parse_result",
    "process_events",
]
