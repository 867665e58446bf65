"""Cross-cutting helpers: error types and failure reporting."""
