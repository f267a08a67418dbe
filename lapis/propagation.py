"""
The propagation graph.

Every typed node can be observed by other nodes. When a node's type changes,
each observer hears about it right away, on the same call stack, and may in
turn change its own type. There is no work-list: the cascade simply runs
until nothing changes, which it must, because types only ever widen by merge
and merge is idempotent.

A late subscriber gets the current type at once, so nobody misses an update.
"""
from enum import Enum
from typing import Optional
from .algebra import LapisType, merge

class Reaction(Enum):
	""" What an observer does with an incoming type. """
	MERGE = "update"
	RESOLVE = "update_input"

class TypedNode:
	_type: Optional[LapisType] = None
	_observers: Optional[dict["TypedNode", Reaction]] = None
	is_new_type: bool = False
	is_specializing_call: bool = False

	@property
	def type(self) -> Optional[LapisType]:
		return self._type

	@type.setter
	def type(self, new_type: Optional[LapisType]):
		if new_type is None or self._type == new_type: return
		self._type = new_type
		self.notify_observers()

	@property
	def observers(self) -> dict["TypedNode", Reaction]:
		return dict(self._observers or {})

	def add_observer(self, observer: "TypedNode", reaction: Reaction = Reaction.MERGE):
		if self._observers is None:
			self._observers = {}
		self._observers[observer] = reaction
		if self._type is not None:
			observer.react(reaction, self._type)

	def notify_observers(self):
		if not self._observers: return
		# A reaction may subscribe new observers here; those got the type when they subscribed.
		for observer, reaction in list(self._observers.items()):
			observer.react(reaction, self._type)

	def react(self, reaction: Reaction, typ: LapisType):
		if reaction is Reaction.MERGE: self.update(typ)
		elif reaction is Reaction.RESOLVE: self.update_input(typ)
		else: raise ValueError(reaction)

	def update(self, typ: LapisType):
		self.add_type(typ)

	def update_input(self, typ: LapisType):
		raise NotImplementedError(type(self))

	def add_type(self, new_type: Optional[LapisType]):
		if new_type is None: return
		self.type = new_type if self._type is None else merge(self._type, new_type)
