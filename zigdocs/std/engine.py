"""Index Adapter for the Zig std documentation engine.

The engine is the WebAssembly module (main.wasm) produced by `zig build std-docs`,
fed with the std sources tarball (sources.tar). It exposes declaration queries as
WASM exports that return either plain integers or packed 64-bit values:

- ``ptr | len << 32`` addressing a UTF-8 string, a u32 array or a u64 array
- ``-1`` (as i32) for "no such declaration"

String inputs are passed by asking the engine for a scratch buffer
(set_input_string / query_begin), writing into it, then calling the export that
reads it. The scratch buffer is shared, so every operation holds the index lock.

This module is the only place that decodes packed pointers. Callers see handles
(plain ints), strings and lists.
"""

import logging
import struct
import threading

from wasmtime import Engine, FuncType, Linker, Module, Store, Trap, ValType, WasmtimeError

from zigdocs.types import Category, EngineFault

logger = logging.getLogger(__name__)

_U32_MASK = 0xFFFF_FFFF
_U64_MASK = 0xFFFF_FFFF_FFFF_FFFF

# js.log severity -> logging level
_LOG_LEVELS = {
    0: logging.ERROR,
    1: logging.WARNING,
    2: logging.INFO,
    3: logging.DEBUG,
}


def unpack_slice(packed: int) -> tuple[int, int]:
    """Split a packed engine return value into (ptr, len)."""
    packed &= _U64_MASK
    return packed & _U32_MASK, packed >> 32


def _optional_handle(value: int) -> int | None:
    # i32 results come back signed; -1 is the engine's "none"
    value &= _U32_MASK
    return None if value == _U32_MASK else value


def _as_i64(value: int) -> int:
    value &= _U64_MASK
    return value - (1 << 64) if value >= 1 << 63 else value


def _forward_log(caller, level: int, ptr: int, length: int) -> None:
    message = ""
    memory = caller.get("memory")
    if memory is not None and length:
        message = bytes(memory.read(caller, ptr, ptr + length)).decode("utf-8", errors="replace")
    logger.log(_LOG_LEVELS.get(level, logging.DEBUG), f"engine: {message}")


class WasmRuntime:
    """A wasmtime instance of the documentation engine.

    Provides the three primitives StdIndex needs: calling an export by name and
    reading/writing linear memory.
    """

    def __init__(self, wasm_bytes: bytes):
        engine = Engine()
        self._store = Store(engine)
        linker = Linker(engine)
        linker.define_func(
            "js",
            "log",
            FuncType([ValType.i32(), ValType.i32(), ValType.i32()], []),
            _forward_log,
            access_caller=True,
        )
        try:
            module = Module(engine, wasm_bytes)
            instance = linker.instantiate(self._store, module)
        except (WasmtimeError, Trap) as e:
            raise EngineFault(f"Failed to instantiate documentation engine: {e}") from e

        self._exports = instance.exports(self._store)
        self._memory = self._export("memory")

    def _export(self, name: str):
        try:
            return self._exports[name]
        except KeyError:
            raise EngineFault(f"Documentation engine has no export named '{name}'") from None

    def call(self, name: str, *args: int) -> int:
        func = self._export(name)
        try:
            return func(self._store, *args)
        except (WasmtimeError, Trap) as e:
            raise EngineFault(f"Engine call '{name}' failed: {e}") from e

    def read(self, ptr: int, length: int) -> bytes:
        return bytes(self._memory.read(self._store, ptr, ptr + length))

    def write(self, ptr: int, data: bytes) -> None:
        self._memory.write(self._store, data, ptr)


class StdIndex:
    """One loaded documentation index.

    Handles returned by this object are only meaningful for this object. The
    engine is not reentrant: all calls are serialized on an internal lock, so a
    StdIndex may be shared between threads but calls never overlap.
    """

    def __init__(self, runtime: WasmRuntime):
        self._runtime = runtime
        self._lock = threading.RLock()

    @classmethod
    def load(cls, wasm_bytes: bytes, sources_tar: bytes) -> "StdIndex":
        """Instantiate the engine and unpack the std sources into it."""
        index = cls(WasmRuntime(wasm_bytes))
        index.unpack(sources_tar)
        logger.info(f"Loaded documentation index ({len(sources_tar)} bytes of sources)")
        return index

    def unpack(self, sources_tar: bytes) -> None:
        with self._lock:
            ptr = self._runtime.call("alloc", len(sources_tar)) & _U32_MASK
            self._runtime.write(ptr, sources_tar)
            self._runtime.call("unpack", ptr, len(sources_tar))

    # ─────────────────────────────────────────────────────────────────────────
    # Decoding
    # ─────────────────────────────────────────────────────────────────────────

    def _string(self, packed: int) -> str:
        ptr, length = unpack_slice(packed)
        if length == 0:
            return ""
        return self._runtime.read(ptr, length).decode("utf-8", errors="replace")

    def _slice32(self, packed: int) -> list[int]:
        ptr, length = unpack_slice(packed)
        if length == 0:
            return []
        return list(struct.unpack_from(f"<{length}I", self._runtime.read(ptr, length * 4)))

    def _slice64(self, packed: int) -> list[int]:
        ptr, length = unpack_slice(packed)
        if length == 0:
            return []
        return list(struct.unpack_from(f"<{length}Q", self._runtime.read(ptr, length * 8)))

    def _write_input(self, export: str, text: str) -> None:
        data = text.encode("utf-8")
        ptr = self._runtime.call(export, len(data)) & _U32_MASK
        if data:
            self._runtime.write(ptr, data)

    # ─────────────────────────────────────────────────────────────────────────
    # Lookup
    # ─────────────────────────────────────────────────────────────────────────

    def find_decl(self, fqn: str) -> int | None:
        """Look up a declaration by exact fully qualified name."""
        with self._lock:
            self._write_input("set_input_string", fqn)
            return _optional_handle(self._runtime.call("find_decl"))

    def find_file_root(self, path: str) -> int | None:
        with self._lock:
            self._write_input("set_input_string", path)
            return _optional_handle(self._runtime.call("find_file_root"))

    def module_name(self, i: int) -> str:
        """Name of the i-th module in the index, or "" past the end."""
        with self._lock:
            return self._string(self._runtime.call("module_name", i))

    def module_names(self) -> list[str]:
        names = []
        while name := self.module_name(len(names)):
            names.append(name)
        return names

    def module_root(self, i: int) -> int:
        with self._lock:
            return self._runtime.call("find_module_root", i) & _U32_MASK

    def run_query(self, text: str, ignore_case: bool) -> list[int]:
        """Run the engine's full-text search; handles come back in engine rank order."""
        with self._lock:
            self._write_input("query_begin", text)
            ptr = self._runtime.call("query_exec", int(ignore_case)) & _U32_MASK
            (count,) = struct.unpack("<I", self._runtime.read(ptr, 4))
            if count == 0:
                return []
            return list(struct.unpack_from(f"<{count}I", self._runtime.read(ptr + 4, count * 4)))

    # ─────────────────────────────────────────────────────────────────────────
    # Declarations
    # ─────────────────────────────────────────────────────────────────────────

    def categorize(self, handle: int) -> tuple[Category, int | None]:
        """Categorize a declaration.

        For aliases the second element is the alias target (None if the engine
        cannot resolve it). The engine only reports an aliasee right after
        categorizing that alias, so both are fetched under one lock.
        """
        with self._lock:
            value = self._runtime.call("categorize_decl", handle, 0)
            try:
                category = Category(value)
            except ValueError:
                raise EngineFault(f"Unrecognized declaration category {value} for handle {handle}") from None
            if category is not Category.ALIAS:
                return category, None
            return category, _optional_handle(self._runtime.call("get_aliasee"))

    def fqn(self, handle: int) -> str:
        with self._lock:
            return self._string(self._runtime.call("decl_fqn", handle))

    def decl_name(self, handle: int) -> str:
        with self._lock:
            return self._string(self._runtime.call("decl_name", handle))

    def parent(self, handle: int) -> int | None:
        with self._lock:
            return _optional_handle(self._runtime.call("decl_parent", handle))

    def file_path(self, handle: int) -> str:
        with self._lock:
            return self._string(self._runtime.call("decl_file_path", handle))

    def namespace_members(self, handle: int, include_private: bool = False) -> list[int]:
        with self._lock:
            return self._slice32(self._runtime.call("namespace_members", handle, int(include_private)))

    def type_fn_members(self, handle: int, include_private: bool = False) -> list[int]:
        with self._lock:
            return self._slice32(self._runtime.call("type_fn_members", handle, int(include_private)))

    def fields(self, handle: int) -> list[int]:
        with self._lock:
            return self._slice32(self._runtime.call("decl_fields", handle))

    def type_fn_fields(self, handle: int) -> list[int]:
        with self._lock:
            return self._slice32(self._runtime.call("type_fn_fields", handle))

    def params(self, handle: int) -> list[int]:
        with self._lock:
            return self._slice32(self._runtime.call("decl_params", handle))

    # ─────────────────────────────────────────────────────────────────────────
    # HTML fragments
    # ─────────────────────────────────────────────────────────────────────────

    def docs_html(self, handle: int, short: bool = False) -> str:
        """Doc comment as HTML; short=True returns only the first paragraph."""
        with self._lock:
            return self._string(self._runtime.call("decl_docs_html", handle, int(short)))

    def fn_proto_html(self, handle: int, short: bool = False) -> str:
        with self._lock:
            return self._string(self._runtime.call("decl_fn_proto_html", handle, int(short)))

    def param_html(self, handle: int, param: int) -> str:
        with self._lock:
            return self._string(self._runtime.call("decl_param_html", handle, param))

    def field_html(self, handle: int, field: int) -> str:
        with self._lock:
            return self._string(self._runtime.call("decl_field_html", handle, field))

    def type_html(self, handle: int) -> str:
        with self._lock:
            return self._string(self._runtime.call("decl_type_html", handle))

    def doctest_html(self, handle: int) -> str:
        with self._lock:
            return self._string(self._runtime.call("decl_doctest_html", handle))

    def source_html(self, handle: int) -> str:
        with self._lock:
            return self._string(self._runtime.call("decl_source_html", handle))

    # ─────────────────────────────────────────────────────────────────────────
    # Error sets
    # ─────────────────────────────────────────────────────────────────────────

    def fn_error_set(self, handle: int) -> int | None:
        """Error set node of a function's return type, or None if it declares none."""
        with self._lock:
            node = self._runtime.call("fn_error_set", handle) & _U64_MASK
            return node or None

    def error_set_owner(self, handle: int, error_set: int) -> int:
        with self._lock:
            return self._runtime.call("fn_error_set_decl", handle, _as_i64(error_set)) & _U32_MASK

    def error_set_entries(self, handle: int, error_set: int) -> list[int]:
        with self._lock:
            return self._slice64(self._runtime.call("error_set_node_list", handle, _as_i64(error_set)))

    def decl_error_set(self, handle: int) -> list[int]:
        """Errors of an error_set declaration."""
        with self._lock:
            return self._slice64(self._runtime.call("decl_error_set", handle))

    def error_html(self, owner: int, error: int) -> str:
        with self._lock:
            return self._string(self._runtime.call("error_html", owner, _as_i64(error)))
