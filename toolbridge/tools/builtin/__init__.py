"""Builtin tools: arithmetic, dictionary lookup, social posting."""
from .arithmetic import add_two_numbers, make_add_tool
from .dictionary import DictionaryClient, DictionaryNotFound, define_word, make_define_tool
from .social import SocialPoster, create_post, credentials_complete, make_post_tool
