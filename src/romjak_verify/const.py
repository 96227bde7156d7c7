ERRORS = {
  "E_MANIFEST_MISSING": "Manifest file missing",
  "E_MANIFEST_JSON": "Manifest JSON invalid",
  "E_MANIFEST_SCHEMA": "Manifest schema not recognised",
  "E_CONFIG_INVALID": "Manifest configuration is not a valid layout",
  "E_IMAGE_MISSING": "ROM image missing",
  "E_SIZE_MISMATCH": "ROM image size does not match the configured ROM size",
  "E_DIGEST_MISMATCH": "ROM image digest does not match manifest",
  "E_INTEGRITY_MISMATCH": "Integrity root does not match manifest",
  "E_SOURCE_UNREADABLE": "Source input could not be read",
  "E_SOURCE_MISMATCH": "ROM image does not match the image regenerated from the source input",
}
