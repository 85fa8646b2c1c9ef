import base64
import json
import struct

import pytest

from nouframe.gltf import (
    GltfError,
    build_getter,
    extract_geometry,
    find_accessor,
    load_mesh,
    parse_gltf,
    parse_gltf_bytes,
)
from nouframe.mesh import Attrib, Mesh

POSITIONS = [(0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 1.0, 0.0), (1.0, 1.0, 0.0)]
NORMALS = [(0.0, 0.0, 1.0)] * 4
UVS = [(0.0, 0.25), (1.0, 0.25), (0.0, 0.5), (1.0, 0.75)]
INDICES = [0, 1, 2, 2, 1, 3]


def build_doc(
    index_type=5123,
    with_indices=True,
    with_normals=True,
    with_uvs=True,
    normal_type="VEC3",
    position_type="VEC3",
    primitives=1,
):
    blob = bytearray()
    views, accessors = [], []

    def add(raw, component_type, type_name, count):
        views.append({"buffer": 0, "byteOffset": len(blob), "byteLength": len(raw)})
        accessors.append(
            {
                "bufferView": len(views) - 1,
                "componentType": component_type,
                "count": count,
                "type": type_name,
            }
        )
        blob.extend(raw)
        while len(blob) % 4:
            blob.append(0)
        return len(accessors) - 1

    if position_type == "VEC3":
        pos_raw = b"".join(struct.pack("<3f", *p) for p in POSITIONS)
    else:
        pos_raw = b"".join(struct.pack("<2f", *p[:2]) for p in POSITIONS)
    attributes = {"POSITION": add(pos_raw, 5126, position_type, len(POSITIONS))}
    if with_normals:
        if normal_type == "VEC3":
            raw = b"".join(struct.pack("<3f", *n) for n in NORMALS)
        else:
            raw = b"".join(struct.pack("<4f", *n, 0.0) for n in NORMALS)
        attributes["NORMAL"] = add(raw, 5126, normal_type, len(NORMALS))
    if with_uvs:
        raw = b"".join(struct.pack("<2f", *uv) for uv in UVS)
        attributes["TEXCOORD_0"] = add(raw, 5126, "VEC2", len(UVS))
    primitive = {"attributes": attributes}
    if with_indices:
        fmt = "<%dH" if index_type == 5123 else "<%dI"
        raw = struct.pack(fmt % len(INDICES), *INDICES)
        primitive["indices"] = add(raw, index_type, "SCALAR", len(INDICES))
    doc = {
        "asset": {"version": "2.0"},
        "meshes": [{"primitives": [dict(primitive) for _ in range(primitives)]}],
        "accessors": accessors,
        "bufferViews": views,
    }
    return doc, bytes(blob)


def as_gltf(doc, blob):
    doc = dict(doc)
    uri = "data:application/octet-stream;base64," + base64.b64encode(blob).decode()
    doc["buffers"] = [{"byteLength": len(blob), "uri": uri}]
    return json.dumps(doc).encode()


def as_glb(doc, blob):
    doc = dict(doc)
    doc["buffers"] = [{"byteLength": len(blob)}]
    json_bytes = json.dumps(doc).encode()
    json_bytes += b" " * (-len(json_bytes) % 4)
    bin_bytes = blob + b"\0" * (-len(blob) % 4)
    body = struct.pack("<II", len(json_bytes), 0x4E4F534A) + json_bytes
    body += struct.pack("<II", len(bin_bytes), 0x004E4942) + bin_bytes
    return struct.pack("<4sII", b"glTF", 2, 12 + len(body)) + body


def expected_verts():
    return [POSITIONS[i] for i in INDICES]


def test_extracts_triangle_list_from_ascii():
    geometry = extract_geometry(parse_gltf_bytes(as_gltf(*build_doc())), True)
    assert geometry.verts == expected_verts()
    assert geometry.normals == [NORMALS[i] for i in INDICES]
    assert geometry.warnings == []


def test_uvs_flipped_and_unflipped():
    model = parse_gltf_bytes(as_gltf(*build_doc()))
    flipped = extract_geometry(model, True).uvs
    plain = extract_geometry(model, False).uvs
    assert plain == [UVS[i] for i in INDICES]
    for (u, v), (pu, pv) in zip(flipped, plain):
        assert u == pu
        assert v == pytest.approx(1.0 - pv)


def test_glb_matches_ascii():
    doc, blob = build_doc()
    from_glb = extract_geometry(parse_gltf_bytes(as_glb(doc, blob), binary=True))
    from_text = extract_geometry(parse_gltf_bytes(as_gltf(doc, blob)))
    assert from_glb == from_text


def test_bad_glb_magic():
    data = bytearray(as_glb(*build_doc()))
    data[:4] = b"nope"
    with pytest.raises(GltfError, match="magic"):
        parse_gltf_bytes(bytes(data), binary=True)


def test_invalid_json():
    with pytest.raises(GltfError):
        parse_gltf_bytes(b"{not json")


def test_multiple_primitives_are_concatenated():
    geometry = extract_geometry(parse_gltf_bytes(as_gltf(*build_doc(primitives=2))))
    assert geometry.verts == expected_verts() * 2


def test_missing_normals_warns_and_drops_them():
    doc, blob = build_doc(with_normals=False)
    geometry = extract_geometry(parse_gltf_bytes(as_gltf(doc, blob)))
    assert geometry.normals is None
    assert "No normals found in mesh primitive 0" in geometry.warnings
    assert geometry.uvs is not None and len(geometry.uvs) == len(INDICES)


def test_missing_uvs_warns():
    geometry = extract_geometry(parse_gltf_bytes(as_gltf(*build_doc(with_uvs=False))))
    assert geometry.uvs is None
    assert "No UVs found in mesh primitive 0" in geometry.warnings


def test_unsupported_normal_format_warns():
    doc, blob = build_doc(normal_type="VEC4")
    geometry = extract_geometry(parse_gltf_bytes(as_gltf(doc, blob)))
    assert geometry.normals is None
    assert any(w.startswith("Normal data is in a currently unsupported format") for w in geometry.warnings)


def test_unsupported_position_format_fails():
    doc, blob = build_doc(position_type="VEC2")
    with pytest.raises(GltfError, match="Vertex position data"):
        extract_geometry(parse_gltf_bytes(as_gltf(doc, blob)))


def test_missing_indices_fails():
    doc, blob = build_doc(with_indices=False)
    with pytest.raises(GltfError, match="missing primitive indices"):
        extract_geometry(parse_gltf_bytes(as_gltf(doc, blob)))


def test_uint_indices_unsupported():
    doc, blob = build_doc(index_type=5125)
    with pytest.raises(GltfError, match="Primitive indices are in a currently unsupported format"):
        extract_geometry(parse_gltf_bytes(as_gltf(doc, blob)))


def test_no_meshes_and_no_primitives():
    doc, blob = build_doc()
    without_meshes = dict(doc, meshes=[])
    with pytest.raises(GltfError, match="No meshes in file."):
        extract_geometry(parse_gltf_bytes(as_gltf(without_meshes, blob)))
    empty_mesh = dict(doc, meshes=[{"primitives": []}])
    with pytest.raises(GltfError, match="No geometry data associated with mesh."):
        extract_geometry(parse_gltf_bytes(as_gltf(empty_mesh, blob)))


def test_find_accessor():
    primitive = {"attributes": {"POSITION": 3}}
    assert find_accessor(primitive, "POSITION") == 3
    assert find_accessor(primitive, "NORMAL") is None


def test_build_getter_reads_elements():
    model = parse_gltf_bytes(as_gltf(*build_doc()))
    getter = build_getter(model, 0)
    assert getter.count == len(POSITIONS)
    assert getter.element_size == 12
    assert getter.stride == getter.element_size
    assert getter.element(1) == struct.pack("<3f", *POSITIONS[1])
    with pytest.raises(IndexError):
        getter.element(len(POSITIONS))


def test_build_getter_bad_index():
    model = parse_gltf_bytes(as_gltf(*build_doc()))
    with pytest.raises(GltfError):
        build_getter(model, 99)


def test_parse_gltf_extension_checks(tmp_path):
    with pytest.raises(GltfError, match="no extension"):
        parse_gltf(tmp_path / "model")
    with pytest.raises(GltfError, match="not a GLTF or GLB"):
        parse_gltf(tmp_path / "model.obj")
    with pytest.raises(GltfError):
        parse_gltf(tmp_path / "missing.gltf")


def test_external_buffer_file(tmp_path):
    doc, blob = build_doc()
    (tmp_path / "tri.bin").write_bytes(blob)
    doc["buffers"] = [{"byteLength": len(blob), "uri": "tri.bin"}]
    (tmp_path / "tri.gltf").write_text(json.dumps(doc))
    geometry = extract_geometry(parse_gltf(tmp_path / "tri.gltf"))
    assert geometry.verts == expected_verts()


def test_load_mesh_fills_buffers(tmp_path):
    path = tmp_path / "tri.glb"
    path.write_bytes(as_glb(*build_doc()))
    mesh = Mesh()
    geometry = load_mesh(path, mesh)
    assert mesh.buffer(Attrib.POSITION).length == len(INDICES)
    assert mesh.buffer(Attrib.UV).length == len(INDICES)
    assert mesh.buffer(Attrib.NORMAL).length == len(geometry.normals)


def test_load_mesh_without_normals(tmp_path):
    path = tmp_path / "tri.gltf"
    path.write_bytes(as_gltf(*build_doc(with_normals=False)))
    mesh = Mesh()
    load_mesh(path, mesh, False)
    assert mesh.buffer(Attrib.NORMAL) is None
    assert mesh.buffer(Attrib.POSITION).length == len(INDICES)


def test_load_mesh_error_names_file(tmp_path):
    path = tmp_path / "broken.gltf"
    doc, blob = build_doc(with_indices=False)
    path.write_bytes(as_gltf(doc, blob))
    with pytest.raises(GltfError, match="broken.gltf"):
        load_mesh(path, Mesh())