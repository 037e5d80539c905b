from .actions import Action, EchoAction, IndentLineAction, InsertAction, NoAction
from .buffer import Change, HostBuffer, TextBuffer, apply_action
from .commands import COMMANDS, CommandContext, CommandRegistry
from .editor_options import EditorOptions
from .errors import (
    AdapterUnavailable,
    HookFailure,
    InvalidSpanRange,
    ModeSitterError,
    ParseFailure,
    UnknownMode,
)
from .faces import FACES, Color, Face, FaceRegistry, define_face, define_standard_faces, face_exists
from .indentation import LineIndenter, OffsideIndenter, TreeIndenter
from .languages import register_builtin_modes
from .modes import MODES, MajorMode, ModeProperties, ModeRegistry, register_mode
from .session import BufferSession, BufferState
from .spans import OverlapPolicy, Span, SpanStore

__all__ = [
    "Action",
    "AdapterUnavailable",
    "BufferSession",
    "BufferState",
    "COMMANDS",
    "Change",
    "Color",
    "CommandContext",
    "CommandRegistry",
    "EchoAction",
    "EditorOptions",
    "FACES",
    "Face",
    "FaceRegistry",
    "HookFailure",
    "HostBuffer",
    "IndentLineAction",
    "InsertAction",
    "InvalidSpanRange",
    "LineIndenter",
    "MODES",
    "MajorMode",
    "ModeProperties",
    "ModeRegistry",
    "ModeSitterError",
    "NoAction",
    "OffsideIndenter",
    "OverlapPolicy",
    "ParseFailure",
    "Span",
    "SpanStore",
    "TextBuffer",
    "TreeIndenter",
    "UnknownMode",
    "apply_action",
    "define_face",
    "define_standard_faces",
    "face_exists",
    "register_builtin_modes",
    "register_mode",
]
