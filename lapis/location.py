"""
I want a simple, light-weight way to pass-around and manipulate points and spans within a collection of source texts.
The concept is simple: Use integers, with spans of them associated to specific texts.

Whatever builds the syntax tree calls start_segment once per text and then insert_token for each token.
The resulting integers are what a Nom carries around as its spot.
"""
from bisect import bisect_left
from typing import NamedTuple, Optional
from boozetools.support.failureprone import SourceText

class Span(NamedTuple):
	""" Aimed at whatever prints error messages """
	path: Optional[str]
	source: Optional[SourceText]
	slice: slice

_slices: list[slice] = []
_bounds: list[int] = []
_paths: list[Optional[str]] = []
_sources: list[Optional[SourceText]] = []

def reset_location_index():
	for it in _slices, _bounds, _paths, _sources: it.clear()
	# Now prepare the "built-in" location, which is location zero:
	start_segment(None)
	insert_token(slice(0,0))

def start_segment(source:Optional[SourceText], path:Optional[str]=None):
	assert isinstance(source, SourceText) or source is None
	_bounds.append(len(_slices)-1)
	_paths.append(path)
	_sources.append(source)

def insert_token(s:slice) -> int:
	index = len(_slices)
	_slices.append(s)
	return index

def lookup_token(index:int) -> Span:
	# A bound is the last token of the segment before, so a token equal to it belongs to that earlier one.
	segment_index = bisect_left(_bounds, index)-1
	return Span(_paths[segment_index], _sources[segment_index], _slices[index])

def lookup_span(first: int, last:int) -> Span:
	left = lookup_token(first)
	right = lookup_token(last)
	if left.source is not right.source:
		return left
	return Span(left.path, left.source, slice(left.slice.start, right.slice.stop))

reset_location_index()
