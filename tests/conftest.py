"""Shared test fixtures: an in-memory documentation index and a loaded session.

FakeIndex exposes the StdIndex method surface over a small declaration table
shaped like the real std index: everything lives under the internal `root`
segment, std.* re-exports are aliases, and ArrayList/HashMap are type functions
kept at their implementation path.
"""

import re
from dataclasses import dataclass, field

import pytest

from zigdocs.session import DocsSession
from zigdocs.types import BuiltinFunction, Category


@dataclass
class FakeDecl:
	fqn: str
	category: Category
	aliasee: str | None = None
	docs: str = ""
	proto: str = ""
	short_proto: str = ""
	type: str = ""
	file: str = ""
	members: list[str] = field(default_factory=list)
	fields: list[str] = field(default_factory=list)
	params: list[str] = field(default_factory=list)
	errors: list[str] = field(default_factory=list)
	doctest: str = ""
	source: str = ""
	private: bool = False


DECLS = [
	FakeDecl("builtin", Category.NAMESPACE, file="builtin.zig"),
	FakeDecl(
		"root",
		Category.NAMESPACE,
		docs="<p>The Zig standard library.</p>",
		file="std.zig",
		members=["root.ArrayList", "root.array_list", "root.hash_map", "root.mem", "root.fs"],
	),
	# Re-exports
	FakeDecl("root.ArrayList", Category.ALIAS, aliasee="root.array_list.ArrayList", file="std.zig"),
	FakeDecl("root.std.ArrayList", Category.ALIAS, aliasee="root.array_list.ArrayList", file="std.zig"),
	FakeDecl("root.std.mem", Category.ALIAS, aliasee="root.mem", file="std.zig"),
	FakeDecl("root.std.fs", Category.ALIAS, aliasee="root.fs", file="std.zig"),
	FakeDecl("root.std.Broken", Category.ALIAS, aliasee=None, file="std.zig"),
	# array_list.zig
	FakeDecl(
		"root.array_list",
		Category.NAMESPACE,
		file="array_list.zig",
		members=["root.array_list.ArrayList"],
		source="<span class=\"tok-kw\">pub fn</span> ArrayList(<span class=\"tok-kw\">comptime</span> T: type) type {\n    <span class=\"tok-kw\">return</span> struct {};\n}",
	),
	FakeDecl(
		"root.array_list.ArrayList",
		Category.TYPE_FUNCTION,
		docs="<p>A contiguous, growable list of items in memory.</p><p>This is a wrapper around an array of <code>T</code> values.</p>",
		proto="<span class=\"tok-kw\">pub fn</span> ArrayList(<span class=\"tok-kw\">comptime</span> T: <span class=\"tok-type\">type</span>) <span class=\"tok-type\">type</span>",
		file="array_list.zig",
		members=[
			"root.array_list.ArrayList.Slice",
			"root.array_list.ArrayList.init",
			"root.array_list.ArrayList.append",
		],
		fields=["<code>items: []T</code>", "<code>capacity: usize</code>"],
		params=["<code>comptime T: type</code>"],
		source="<span class=\"tok-kw\">pub fn</span> ArrayList(<span class=\"tok-kw\">comptime</span> T: type) type {\n    <span class=\"tok-kw\">return</span> struct {};\n}",
	),
	FakeDecl("root.array_list.ArrayList.Slice", Category.TYPE, docs="<p>Slice of items.</p>", file="array_list.zig"),
	FakeDecl(
		"root.array_list.ArrayList.init",
		Category.FUNCTION,
		docs="<p>Initialize with an allocator.</p>",
		proto="pub fn init(gpa: Allocator) Self",
		short_proto="fn init(gpa: Allocator) Self",
		file="array_list.zig",
		params=["gpa: Allocator"],
	),
	FakeDecl(
		"root.array_list.ArrayList.append",
		Category.FUNCTION,
		docs="<p>Extend the list by 1 element.</p>",
		proto="pub fn append(self: *Self, item: T) Allocator.Error!void",
		short_proto="fn append(self: *Self, item: T) Allocator.Error!void",
		file="array_list.zig",
		params=["self: *Self", "item: T"],
		errors=["<dt>OutOfMemory</dt><dd><p>Not enough memory was available.</p></dd>"],
	),
	# hash_map.zig
	FakeDecl("root.hash_map", Category.NAMESPACE, file="hash_map.zig", members=["root.hash_map.HashMap"]),
	FakeDecl(
		"root.hash_map.HashMap",
		Category.TYPE_FUNCTION,
		docs="<p>General purpose hash table.</p>",
		proto="pub fn HashMap(comptime K: type, comptime V: type) type",
		file="hash_map.zig",
	),
	# mem.zig
	FakeDecl(
		"root.mem",
		Category.NAMESPACE,
		docs="<p>Memory utilities.</p>",
		file="mem.zig",
		members=[
			"root.mem.Allocator",
			"root.mem.eql",
			"root.mem.helper",
			"root.mem.page_size",
			"root.mem.LoopA",
		],
		source="<span class=\"tok-kw\">const</span> std = @import(\"std\");\n\n<span class=\"tok-kw\">pub fn</span> eql() bool {}",
	),
	FakeDecl(
		"root.mem.Allocator",
		Category.CONTAINER,
		docs="<p>The allocator interface.</p>",
		file="mem/Allocator.zig",
		members=["root.mem.Allocator.alloc", "root.mem.Allocator.Error"],
		fields=["<code>ptr: *anyopaque</code>", "<code>vtable: *const VTable</code>"],
	),
	FakeDecl(
		"root.mem.Allocator.alloc",
		Category.FUNCTION,
		docs="<p>Allocate an array of <code>n</code> items.</p>",
		proto="pub fn alloc(self: Allocator, comptime T: type, n: usize) Error![]T",
		short_proto="fn alloc(self: Allocator, comptime T: type, n: usize) Error![]T",
		file="mem/Allocator.zig",
	),
	FakeDecl(
		"root.mem.Allocator.Error",
		Category.ERROR_SET,
		docs="<p>Errors an allocator can return.</p>",
		file="mem/Allocator.zig",
		errors=["<dt>OutOfMemory</dt>"],
	),
	FakeDecl(
		"root.mem.eql",
		Category.FUNCTION,
		docs="<p>Compares two slices and returns whether they are equal.</p>",
		proto="<span class=\"tok-kw\">pub fn</span> eql(<span class=\"tok-kw\">comptime</span> T: type, a: []<span class=\"tok-kw\">const</span> T, b: []<span class=\"tok-kw\">const</span> T) bool",
		short_proto="fn eql(comptime T: type, a: []const T, b: []const T) bool",
		file="mem.zig",
		params=["<code>comptime T: type</code>", "<code>a: []const T</code>", "<code>b: []const T</code>"],
		doctest="test eql {\n    try expect(eql(u8, &quot;abc&quot;, &quot;abc&quot;));\n}",
		source="<span class=\"tok-kw\">pub fn</span> eql(comptime T: type, a: []const T, b: []const T) bool {\n    <span class=\"tok-kw\">return</span> true;\n}",
	),
	FakeDecl("root.mem.helper", Category.FUNCTION, file="mem.zig", private=True),
	FakeDecl(
		"root.mem.page_size",
		Category.GLOBAL_CONST,
		docs="<p>Page size of the target.</p>",
		type="usize",
		file="mem.zig",
		source="<span class=\"tok-kw\">pub const</span> page_size = 4096;",
	),
	FakeDecl("root.mem.LoopA", Category.ALIAS, aliasee="root.mem.LoopB", file="mem.zig"),
	FakeDecl("root.mem.LoopB", Category.ALIAS, aliasee="root.mem.LoopA", file="mem.zig"),
	# fs.zig
	FakeDecl("root.fs", Category.NAMESPACE, docs="<p>File system access.</p>", file="fs.zig", members=["root.fs.File"]),
	FakeDecl("root.fs.File", Category.CONTAINER, docs="<p>An open file.</p>", file="fs/File.zig"),
]

# Multi-hop and self-referencing aliases, plus a parameter the engine renders empty
EDGE_DECLS = [
	FakeDecl("root", Category.NAMESPACE, members=["root.chain"]),
	FakeDecl("root.chain", Category.NAMESPACE, members=["root.chain.First", "root.chain.Itself", "root.chain.pack"]),
	FakeDecl("root.chain.First", Category.ALIAS, aliasee="root.chain.Second"),
	FakeDecl("root.chain.Second", Category.ALIAS, aliasee="root.chain.Third"),
	FakeDecl("root.chain.Third", Category.ALIAS, aliasee="root.chain.Concrete"),
	FakeDecl("root.chain.Concrete", Category.CONTAINER, docs="<p>End of the chain.</p>"),
	FakeDecl("root.chain.Itself", Category.ALIAS, aliasee="root.chain.Itself"),
	FakeDecl(
		"root.chain.pack",
		Category.FUNCTION,
		proto="pub fn pack(a: u8, anytype, c: u8) u32",
		params=["<code>a: u8</code>", "", "<code>c: u8</code>"],
	),
]

MODULES = ["builtin", "std"]
MODULE_ROOTS = {"builtin": "builtin", "std": "root"}
FILE_ROOTS = {
	"std.zig": "root",
	"array_list.zig": "root.array_list",
	"mem.zig": "root.mem",
	"fs.zig": "root.fs",
}

_FIRST_PARAGRAPH = re.compile(r"<p>.*?</p>", re.DOTALL)


class FakeIndex:
	"""In-memory stand-in for StdIndex with the same method surface."""

	def __init__(self, decls: list[FakeDecl] = DECLS):
		self.decls = list(decls)
		self.handles = {decl.fqn: handle for handle, decl in enumerate(self.decls)}
		self.queries: list[tuple[str, bool]] = []
		self.categorized: list[int] = []

	def _decl(self, handle: int) -> FakeDecl:
		return self.decls[handle]

	# Lookup

	def find_decl(self, fqn: str) -> int | None:
		return self.handles.get(fqn)

	def find_file_root(self, path: str) -> int | None:
		root = FILE_ROOTS.get(path)
		return self.handles[root] if root is not None else None

	def module_name(self, i: int) -> str:
		return MODULES[i] if i < len(MODULES) else ""

	def module_names(self) -> list[str]:
		return list(MODULES)

	def module_root(self, i: int) -> int:
		return self.handles[MODULE_ROOTS[MODULES[i]]]

	def run_query(self, text: str, ignore_case: bool) -> list[int]:
		self.queries.append((text, ignore_case))
		needle = text.lower() if ignore_case else text
		return [
			handle
			for handle, decl in enumerate(self.decls)
			if needle in (decl.fqn.lower() if ignore_case else decl.fqn)
		]

	# Declarations

	def categorize(self, handle: int) -> tuple[Category, int | None]:
		self.categorized.append(handle)
		decl = self._decl(handle)
		if decl.category is not Category.ALIAS:
			return decl.category, None
		return decl.category, self.handles.get(decl.aliasee) if decl.aliasee else None

	def fqn(self, handle: int) -> str:
		return self._decl(handle).fqn

	def decl_name(self, handle: int) -> str:
		return self._decl(handle).fqn.rsplit(".", 1)[-1]

	def parent(self, handle: int) -> int | None:
		fqn = self._decl(handle).fqn
		if "." not in fqn:
			return None
		return self.handles.get(fqn.rsplit(".", 1)[0])

	def file_path(self, handle: int) -> str:
		return self._decl(handle).file

	def _members(self, handle: int, include_private: bool) -> list[int]:
		children = [self.handles[fqn] for fqn in self._decl(handle).members]
		return [child for child in children if include_private or not self._decl(child).private]

	def namespace_members(self, handle: int, include_private: bool = False) -> list[int]:
		if self._decl(handle).category is Category.TYPE_FUNCTION:
			return []
		return self._members(handle, include_private)

	def type_fn_members(self, handle: int, include_private: bool = False) -> list[int]:
		if self._decl(handle).category is not Category.TYPE_FUNCTION:
			return []
		return self._members(handle, include_private)

	def fields(self, handle: int) -> list[int]:
		if self._decl(handle).category is Category.TYPE_FUNCTION:
			return []
		return list(range(len(self._decl(handle).fields)))

	def type_fn_fields(self, handle: int) -> list[int]:
		if self._decl(handle).category is not Category.TYPE_FUNCTION:
			return []
		return list(range(len(self._decl(handle).fields)))

	def params(self, handle: int) -> list[int]:
		return list(range(len(self._decl(handle).params)))

	# HTML fragments

	def docs_html(self, handle: int, short: bool = False) -> str:
		docs = self._decl(handle).docs
		if short:
			first = _FIRST_PARAGRAPH.search(docs)
			return first.group(0) if first else docs
		return docs

	def fn_proto_html(self, handle: int, short: bool = False) -> str:
		decl = self._decl(handle)
		return decl.short_proto if short else decl.proto

	def param_html(self, handle: int, param: int) -> str:
		return self._decl(handle).params[param]

	def field_html(self, handle: int, field: int) -> str:
		return self._decl(handle).fields[field]

	def type_html(self, handle: int) -> str:
		return self._decl(handle).type

	def doctest_html(self, handle: int) -> str:
		return self._decl(handle).doctest

	def source_html(self, handle: int) -> str:
		return self._decl(handle).source

	# Error sets

	def fn_error_set(self, handle: int) -> int | None:
		decl = self._decl(handle)
		if decl.category is not Category.FUNCTION or not decl.errors:
			return None
		return 1000 + handle

	def error_set_owner(self, handle: int, error_set: int) -> int:
		return handle

	def error_set_entries(self, handle: int, error_set: int) -> list[int]:
		return list(range(len(self._decl(handle).errors)))

	def decl_error_set(self, handle: int) -> list[int]:
		return list(range(len(self._decl(handle).errors)))

	def error_html(self, owner: int, error: int) -> str:
		return self._decl(owner).errors[error]


BUILTINS = [
	BuiltinFunction(
		func="@addWithOverflow",
		signature="@addWithOverflow(a: anytype, b: anytype) struct { @TypeOf(a, b), u1 }",
		docs="Performs `a + b` and returns a tuple with the result and a possible overflow bit.",
	),
	BuiltinFunction(
		func="@atomicLoad",
		signature="@atomicLoad(comptime T: type, ptr: *const T, comptime ordering: AtomicOrder) T",
		docs="This builtin function atomically dereferences a pointer to a `T` and returns the value.",
	),
	BuiltinFunction(
		func="@mulWithOverflow",
		signature="@mulWithOverflow(a: anytype, b: anytype) struct { @TypeOf(a, b), u1 }",
		docs="Performs `a * b` and returns a tuple with the result and a possible overflow bit.",
	),
	BuiltinFunction(
		func="@sqrt",
		signature="@sqrt(value: anytype) @TypeOf(value)",
		docs="Performs the square root of a floating point number.",
	),
]


LANGREF_HTML = """<!doctype html>
<html>
<body>
<h2 id="Builtin-Functions"><a href="#toc-Builtin-Functions">Builtin Functions</a></h2>
<p>Builtin functions are provided by the compiler and are prefixed with <code>@</code>.</p>
<h3 id="addWithOverflow"><a href="#toc-addWithOverflow">@addWithOverflow</a></h3>
<pre><code>@addWithOverflow(a: anytype, b: anytype) struct { @TypeOf(a, b), u1 }</code></pre>
<p>Performs <code>a + b</code> and returns a tuple with the result and a possible overflow bit.</p>
<h3 id="atomicLoad"><a href="#toc-atomicLoad">@atomicLoad</a></h3>
<pre><code>@atomicLoad(comptime T: type, ptr: *const T, comptime ordering: AtomicOrder) T</code></pre>
<p>This builtin function atomically dereferences a pointer to a <code>T</code> and returns the value.</p>
<p>See also:</p>
<ul>
<li><a href="#atomicStore">@atomicStore</a></li>
<li><a href="https://example.org/atomics">Atomics primer</a></li>
</ul>
<h3 id="mulWithOverflow"><a href="#toc-mulWithOverflow">@mulWithOverflow</a></h3>
<pre><code>@mulWithOverflow(a: anytype, b: anytype) struct { @TypeOf(a, b), u1 }</code></pre>
<p>Performs <code>a * b</code> and returns a tuple with the result and a possible overflow bit.</p>
<p>See also:</p>
<h3 id="Builtin-Notes"><a href="#toc-Builtin-Notes">Notes on builtins</a></h3>
<p>Not a builtin function.</p>
<h3 id="sqrt"><a href="#toc-sqrt">@sqrt</a></h3>
<pre><code>@sqrt(value: anytype) @TypeOf(value)</code></pre>
<p>Performs the square root of a floating point number.</p>
<figure><figcaption class="zig-cap"><cite class="file">test_sqrt.zig</cite></figcaption><pre><code>const std = @import("std");

test "sqrt" {
    try std.testing.expect(@sqrt(4.0) == 2.0);
}</code></pre></figure>
<figure><figcaption class="shell-cap">Shell</figcaption><pre><samp>$ zig test test_sqrt.zig
1/1 test_sqrt.test.sqrt...OK</samp></pre></figure>
<h2 id="Optimizations"><a href="#toc-Optimizations">Optimizations</a></h2>
<h3 id="notBuiltin"><a href="#toc-notBuiltin">@afterTheSection</a></h3>
<pre><code>@afterTheSection() void</code></pre>
</body>
</html>
"""


@pytest.fixture
def index() -> FakeIndex:
	return FakeIndex()


@pytest.fixture
def edge_index() -> FakeIndex:
	return FakeIndex(EDGE_DECLS)


@pytest.fixture
def builtins() -> list[BuiltinFunction]:
	return list(BUILTINS)


@pytest.fixture
def session(index, builtins) -> DocsSession:
	return DocsSession(index=index, builtins=builtins, version="master")


@pytest.fixture
def langref_html() -> str:
	return LANGREF_HTML
