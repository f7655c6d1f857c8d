"""Repository gateway: merge-base queries, history walks and branch listing."""
