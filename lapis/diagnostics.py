import sys
from typing import Optional, Iterator
from boozetools.support.failureprone import illustration

from .location import lookup_span
from .ontology import Phrase

class TooManyIssues(Exception):
	pass

class InferenceError(Exception):
	"""
	Something about the program makes it impossible to assign types.
	The node says where; the inner error, if any, says what went wrong
	inside a method instantiation that this error is reporting on.
	"""
	def __init__(self, message:str, node=None, inner:Optional["InferenceError"]=None):
		super().__init__(message)
		self.message, self.node, self.inner = message, node, inner

	def __str__(self): return self.message

	def chain(self) -> Iterator["InferenceError"]:
		""" This error, then each wrapped cause in turn, innermost last. """
		error = self
		while error is not None:
			yield error
			error = error.inner

	def root_cause(self) -> "InferenceError":
		*_, last = self.chain()
		return last

class UndefinedMethod(InferenceError): pass
class ArityMismatch(InferenceError): pass
class FrozenCallMismatch(InferenceError): pass
class UnknownConstant(InferenceError): pass
class MisplacedInstanceVariable(InferenceError): pass
class SpecializationFailure(InferenceError): pass

class Report:
	""" Collects issues, and says things on stderr when asked to be chatty. """
	_issues : list["Pic"]

	def __init__(self, *, verbose:int=0, max_issues=3):
		self._verbose = verbose or 0   # Because None is incomparable.
		self._issues = []
		self._max_issues = max_issues

	@property
	def issues(self) -> list["Pic"]: return list(self._issues)

	def ok(self): return not self._issues
	def sick(self): return bool(self._issues)

	def issue(self, it:"Pic"):
		self._issues.append(it)
		if len(self._issues) == self._max_issues:
			raise TooManyIssues(self)

	def info(self, *args):
		if self._verbose:
			print(*args, file=sys.stderr)

	def complain(self, error:InferenceError):
		""" Turn an inference error, with everything it wraps, into an issue. """
		self.issue(Pic(error))

	def complain_to_console(self):
		""" Emit all the issues to the console. """
		_bemoan(self._issues)

	def assert_no_issues(self, message):
		""" Does what it says on the tin """
		if self._issues:
			self.complain_to_console()
			raise AssertionError(_tally(self._issues)+" "+message)

class Annotation:
	path: Optional[str]
	slice: slice
	def __init__(self, node:Phrase):
		span = lookup_span(*node.span())
		self.path = span.path
		self.source = span.source
		self.slice = span.slice
	def illustrate(self, caption:str):
		row, col = self.source.find_row_col(self.slice.start)
		single_line = self.source.line_of_text(row)
		width = self.slice.stop - self.slice.start
		return illustration(single_line, col, width, prefix='% 6d |' % row, caption=caption)

class Pic:
	"""
	One issue, drawn as the path from the outermost call site down through
	each method instantiation to the root cause. Steps whose node came from
	real source text get an excerpt; built-in and synthetic ones do not.
	"""
	def __init__(self, error:InferenceError):
		self._steps = list(error.chain())
	@property
	def description(self) -> str: return self._steps[0].message
	@property
	def root_cause(self) -> str: return self._steps[-1].message
	def as_text(self):
		lines = [self.description]
		chained = len(self._steps) > 1
		if chained:
			lines[0] += ": " + self.root_cause
		path = None
		for depth, step in enumerate(self._steps):
			if chained:
				lines.append("%s%d. %s" % ("  "*depth, depth+1, step.message))
			if not isinstance(step.node, Phrase): continue
			ann = Annotation(step.node)
			if ann.source is None: continue
			if ann.path != path:
				path = ann.path
				lines.append("   in %s" % path)
			lines.append(ann.illustrate("here"))
		return '\n'.join(lines)

def _tally(issues) -> str:
	return "Type inference failed with %d issue%s." % (len(issues), "" if len(issues) == 1 else "s")

def _bemoan(issues):
	""" Emit all the issues to the console. """
	if not issues: return
	print(_tally(issues), file=sys.stderr)
	for n, pic in enumerate(issues, 1):
		print("", file=sys.stderr)
		print("[issue %d]" % n, pic.as_text(), file=sys.stderr)
	sys.stderr.flush()
