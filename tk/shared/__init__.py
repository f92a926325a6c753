from .errors import ApplyError, CommandError, ProvisionError, TkError, ValidationError
from .exec import Deadline, Mode, exec_command
from .tools import Duration, docstrings, parse_duration, tk_log
