"""HTTP surface of the complaint desk."""
