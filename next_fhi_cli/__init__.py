"""next-fhi-cli -- scaffolds Next.js projects with the FHI tech stack."""

__version__ = "1.0.0"
