"""Scene bookkeeping for real-time 3D: transforms, entities, cameras, input state, meshes and glTF loading, sprite sheets, batched debug geometry, logging and process usage figures."""

__version__ = "0.1.0"