from .config import GPTEvalConfig, load_config
from .conversation import ConversationState
from .document import Position, Range, Selection, TextDocument, TextEdit
from .editor import ExpressionEditor, GPTEvalExpression, locate_block, split_expression
from .gpt import GPT
from .prompts import ChatMessage, ChatPrompt, parse_prompt
from .repl import Repl, create_repl

__all__ = [
    "GPTEvalConfig",
    "load_config",
    "ConversationState",
    "Position",
    "Range",
    "Selection",
    "TextDocument",
    "TextEdit",
    "ExpressionEditor",
    "GPTEvalExpression",
    "locate_block",
    "split_expression",
    "GPT",
    "ChatMessage",
    "ChatPrompt",
    "parse_prompt",
    "Repl",
    "create_repl",
]
__version__ = "0.1.0"
