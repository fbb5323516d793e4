"""Services — segmentation, extraction, temporal rewrite, proof, prover client, workspace, export, storage."""
