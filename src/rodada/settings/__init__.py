# ruff: noqa: F403
from .base import *
from .celery import *
from .email import *
from .finance import *
from .ninja import *
from .observability import *
from .unfold import *
