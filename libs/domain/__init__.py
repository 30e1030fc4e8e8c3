"""Frame synchronization, capture and render loops."""
