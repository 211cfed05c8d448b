"""Think-tank site API: public publication feed plus role-gated admin and moderator surfaces."""

__version__ = "0.1.0"
