"""Loading of mesh geometry from glTF 2.0 files (.gltf and .glb)."""

from __future__ import annotations

import base64
import binascii
import json
import logging
import os
import struct
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union
from urllib.parse import unquote

from nouframe.mesh import Mesh

logger = logging.getLogger(__name__)

_GLB_MAGIC = b"glTF"
_CHUNK_JSON = 0x4E4F534A
_CHUNK_BIN = 0x004E4942

_COMPONENT_SIZES = {5120: 1, 5121: 1, 5122: 2, 5123: 2, 5125: 4, 5126: 4}
_TYPE_COMPONENTS = {
    "SCALAR": 1,
    "VEC2": 2,
    "VEC3": 3,
    "VEC4": 4,
    "MAT2": 4,
    "MAT3": 9,
    "MAT4": 16,
}

_UNSUPPORTED_HINT = (
    "Consider changing your GLTF export settings, or else this loader "
    "must be augmented to support the provided format."
)


class GltfError(Exception):
    """Raised when a glTF file cannot be read or holds unsupported geometry."""


@dataclass
class GltfModel:
    """A parsed glTF document with its buffers loaded."""

    document: dict
    buffers: list[bytes] = field(default_factory=list)

    @property
    def meshes(self) -> list[dict]:
        return self.document.get("meshes", [])

    @property
    def accessors(self) -> list[dict]:
        return self.document.get("accessors", [])

    @property
    def buffer_views(self) -> list[dict]:
        return self.document.get("bufferViews", [])


@dataclass
class DataGetter:
    """Strided view of an accessor's elements within a buffer."""

    data: bytes
    offset: int
    count: int
    stride: int
    element_size: int

    def element(self, index: int) -> bytes:
        """Raw bytes of element ``index``."""
        if not 0 <= index < self.count:
            raise IndexError(f"element {index} out of range (count {self.count})")
        start = self.offset + index * self.stride
        end = start + self.element_size
        if end > len(self.data):
            raise GltfError("Accessor reads past the end of its buffer.")
        return self.data[start:end]


@dataclass
class Geometry:
    """Triangle-list geometry extracted from a glTF mesh."""

    verts: list[tuple[float, float, float]]
    normals: Optional[list[tuple[float, float, float]]]
    uvs: Optional[list[tuple[float, float]]]
    warnings: list[str] = field(default_factory=list)


def _split_glb(data: bytes) -> tuple[bytes, Optional[bytes]]:
    if len(data) < 12:
        raise GltfError("Data is too short to be a GLB file.")
    magic, version, length = struct.unpack_from("<4sII", data, 0)
    if magic != _GLB_MAGIC:
        raise GltfError("Invalid GLB magic.")
    if version != 2:
        raise GltfError(f"Unsupported GLB version {version}.")
    if length > len(data):
        raise GltfError("GLB length exceeds the data size.")
    pos = 12
    json_chunk: Optional[bytes] = None
    bin_chunk: Optional[bytes] = None
    while pos + 8 <= length:
        chunk_len, chunk_type = struct.unpack_from("<II", data, pos)
        pos += 8
        end = pos + chunk_len
        if end > length:
            raise GltfError("GLB chunk exceeds the file length.")
        chunk = bytes(data[pos:end])
        pos = end
        if json_chunk is None:
            if chunk_type != _CHUNK_JSON:
                raise GltfError("First GLB chunk must be JSON.")
            json_chunk = chunk
        elif chunk_type == _CHUNK_BIN and bin_chunk is None:
            bin_chunk = chunk
    if json_chunk is None:
        raise GltfError("GLB file has no JSON chunk.")
    return json_chunk, bin_chunk


def _decode_data_uri(uri: str) -> bytes:
    header, sep, payload = uri.partition(",")
    if not sep or not header.endswith(";base64"):
        raise GltfError("Only base64 data URIs are supported.")
    try:
        return base64.b64decode(payload, validate=True)
    except binascii.Error as exc:
        raise GltfError(f"Invalid base64 data in buffer URI: {exc}") from exc


def _load_buffers(
    document: dict, bin_chunk: Optional[bytes], base_dir: Optional[Path]
) -> list[bytes]:
    buffers = []
    for index, spec in enumerate(document.get("buffers", [])):
        uri = spec.get("uri")
        if uri is None:
            if index != 0 or bin_chunk is None:
                raise GltfError(f"Buffer {index} has no data.")
            data = bin_chunk
        elif uri.startswith("data:"):
            data = _decode_data_uri(uri)
        else:
            if base_dir is None:
                raise GltfError(f"Cannot resolve external buffer '{uri}'.")
            try:
                data = (base_dir / unquote(uri)).read_bytes()
            except OSError as exc:
                raise GltfError(f"Failed to read buffer '{uri}': {exc}") from exc
        if len(data) < spec.get("byteLength", 0):
            raise GltfError(f"Buffer {index} is shorter than its byteLength.")
        buffers.append(data)
    return buffers


def parse_gltf_bytes(
    data: bytes, binary: bool = False, base_dir: Union[str, Path, None] = None
) -> GltfModel:
    """Parse glTF JSON text or a GLB container held in memory."""
    bin_chunk: Optional[bytes] = None
    json_bytes = data
    if binary:
        json_bytes, bin_chunk = _split_glb(data)
    try:
        document = json.loads(json_bytes.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise GltfError(f"Invalid glTF JSON: {exc}") from exc
    if not isinstance(document, dict):
        raise GltfError("glTF document must be a JSON object.")
    directory = Path(base_dir) if base_dir is not None else None
    return GltfModel(document, _load_buffers(document, bin_chunk, directory))


def parse_gltf(filename: Union[str, Path]) -> GltfModel:
    """Read a .gltf or .glb file."""
    path = Path(filename)
    name = os.path.basename(str(filename))
    dot = name.find(".")
    if dot == -1 or dot >= len(name) - 1:
        raise GltfError("Filename specified incorrectly - no extension!")
    ext = name[dot + 1:]
    if ext not in ("gltf", "glb"):
        raise GltfError("Filename specified incorrectly - not a GLTF or GLB!")
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise GltfError(f"Failed to load .gltf: {filename}: {exc}") from exc
    return parse_gltf_bytes(data, binary=ext == "glb", base_dir=path.parent)


def find_accessor(primitive: dict, name: str) -> Optional[int]:
    """Index of the accessor for attribute ``name``, or None if absent."""
    return primitive.get("attributes", {}).get(name)


def _item(items: list, index: Any, what: str) -> dict:
    if not isinstance(index, int) or not 0 <= index < len(items):
        raise GltfError(f"Invalid {what} index {index}.")
    return items[index]


def _byte_stride(view: dict, component_size: int, element_size: int) -> int:
    stride = view.get("byteStride", 0)
    if not stride:
        return element_size
    if stride % component_size:
        raise GltfError("Invalid byteStride in buffer view.")
    return stride


def build_getter(gltf: GltfModel, accessor_index: int) -> DataGetter:
    """Build a reader for the elements of an accessor."""
    accessor = _item(gltf.accessors, accessor_index, "accessor")
    view = _item(gltf.buffer_views, accessor.get("bufferView"), "buffer view")
    data = _item(gltf.buffers, view.get("buffer"), "buffer")
    component_size = _COMPONENT_SIZES.get(accessor.get("componentType"))
    components = _TYPE_COMPONENTS.get(accessor.get("type"))
    if component_size is None or components is None:
        raise GltfError("Accessor has an unknown component type or element type.")
    element_size = component_size * components
    return DataGetter(
        data=data,
        offset=view.get("byteOffset", 0) + accessor.get("byteOffset", 0),
        count=accessor.get("count", 0),
        stride=_byte_stride(view, component_size, element_size),
        element_size=element_size,
    )


def _unpack(getter: DataGetter, fmt: str, index: int, primitive_index: int) -> tuple:
    try:
        return struct.unpack(fmt, getter.element(index))
    except IndexError as exc:
        raise GltfError(
            f"Vertex index {index} out of range in mesh primitive {primitive_index}"
        ) from exc


@dataclass
class _Accumulator:
    verts: list = field(default_factory=list)
    normals: list = field(default_factory=list)
    uvs: list = field(default_factory=list)
    has_normals: bool = True
    has_uvs: bool = True
    warnings: list[str] = field(default_factory=list)


def _process_primitive(
    gltf: GltfModel, index: int, primitive: dict, flip_uv_y: bool, acc: _Accumulator
) -> None:
    if primitive.get("indices") is None:
        raise GltfError(
            "File is missing primitive indices. "
            "Consider changing your GLTF export settings, or else this loader "
            "must be augmented to support files without indices."
        )
    faces = build_getter(gltf, primitive["indices"])
    if faces.element_size != 2:
        raise GltfError(
            "Primitive indices are in a currently unsupported format. " + _UNSUPPORTED_HINT
        )

    position_id = find_accessor(primitive, "POSITION")
    if position_id is None:
        raise GltfError(f"No vertex positions found in mesh primitive {index}")

    normal_id = find_accessor(primitive, "NORMAL")
    acc.has_normals = acc.has_normals and normal_id is not None
    if not acc.has_normals:
        acc.warnings.append(f"No normals found in mesh primitive {index}")

    uv_id = find_accessor(primitive, "TEXCOORD_0")
    acc.has_uvs = acc.has_uvs and uv_id is not None
    if uv_id is None:
        acc.warnings.append(f"No UVs found in mesh primitive {index}")

    positions = build_getter(gltf, position_id)
    if positions.element_size != 12:
        raise GltfError(
            "Vertex position data is in a currently unsupported format. "
            + _UNSUPPORTED_HINT
        )

    normals: Optional[DataGetter] = None
    if acc.has_normals:
        normals = build_getter(gltf, normal_id)
        if normals.element_size != 12:
            acc.has_normals = False
            normals = None
            acc.warnings.append(
                "Normal data is in a currently unsupported format. " + _UNSUPPORTED_HINT
            )

    uvs: Optional[DataGetter] = None
    if acc.has_uvs:
        uvs = build_getter(gltf, uv_id)
        if uvs.element_size != 8:
            acc.has_uvs = False
            uvs = None
            acc.warnings.append(
                "UV data is in a currently unsupported format. " + _UNSUPPORTED_HINT
            )

    for face in range(faces.count):
        (vert,) = struct.unpack("<H", faces.element(face))
        acc.verts.append(_unpack(positions, "<3f", vert, index))
        if normals is not None:
            acc.normals.append(_unpack(normals, "<3f", vert, index))
        if uvs is not None:
            u, v = _unpack(uvs, "<2f", vert, index)
            acc.uvs.append((u, 1.0 - v) if flip_uv_y else (u, v))


def extract_geometry(gltf: GltfModel, flip_uv_y: bool = True) -> Geometry:
    """Extract positions, normals and UVs of the first mesh as a triangle list."""
    meshes = gltf.meshes
    if not meshes:
        raise GltfError("No meshes in file.")
    primitives = meshes[0].get("primitives", [])
    if not primitives:
        raise GltfError("No geometry data associated with mesh.")
    acc = _Accumulator()
    for index, primitive in enumerate(primitives):
        _process_primitive(gltf, index, primitive, flip_uv_y, acc)
    return Geometry(
        verts=acc.verts,
        normals=acc.normals if acc.has_normals else None,
        uvs=acc.uvs if acc.has_uvs else None,
        warnings=acc.warnings,
    )


def load_mesh(
    filename: Union[str, Path], mesh: Mesh, flip_uv_y: bool = True
) -> Geometry:
    """Load the first mesh of a glTF file into ``mesh`` and return its geometry."""
    try:
        geometry = extract_geometry(parse_gltf(filename), flip_uv_y)
    except GltfError as exc:
        raise GltfError(f"Error extracting mesh from {filename}: {exc}") from exc
    mesh.set_verts(geometry.verts)
    if geometry.normals is not None:
        mesh.set_normals(geometry.normals)
    if geometry.uvs is not None:
        mesh.set_uvs(geometry.uvs)
    if geometry.warnings:
        logger.warning(
            "Warning(s) extracting mesh from %s: %s",
            filename,
            "\n".join(geometry.warnings),
        )
    logger.info("Loaded mesh from %s.", filename)
    return geometry