from enum import Enum

class MessageType(str, Enum):
    """Kind of payload a message carries; stored and echoed, never interpreted"""
    TEXT = "text"
    IMAGE = "image"
    FILE = "file"

class ServerEvent(str, Enum):
    """Events pushed to live connections"""
    USER_JOINED = "user:joined"
    MESSAGE_NEW = "message:new"
    MESSAGE_SENT = "message:sent"
    CONVERSATION_UPDATE = "conversation:update"
    MESSAGES_READ = "messages:read"
    TYPING_START = "typing:start"
    TYPING_STOP = "typing:stop"
    ERROR = "error"

class ClientEvent(str, Enum):
    """Events accepted from live connections"""
    USER_JOIN = "user:join"
    TYPING_START = "typing:start"
    TYPING_STOP = "typing:stop"
