from .apply import apply_source, wait_for_source
from .auth import BasicAuth, NoAuth, SSHAuth, provision
from .manifest import GitSource, render_git_source
from .resolver import SourceInput, resolve_source_input
