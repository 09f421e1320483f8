import os
import shlex


class EnvironmentManager:
	def __init__(self, env_vars, unset_vars=()):
		self.env_vars = dict(env_vars)
		self.unset_vars = list(unset_vars)

	def setup(self):
		for k, v in self.env_vars.items():
			os.environ[k] = v
		for k in self.unset_vars:
			os.environ.pop(k, None)

	def render_exports(self) -> str:
		"""Shell lines reproducing this environment change, suitable for eval."""
		lines = [f"export {k}={shlex.quote(v)}" for k, v in sorted(self.env_vars.items())]
		lines += [f"unset {k}" for k in sorted(self.unset_vars)]
		return "\n".join(lines)
