"""Mirror a folder of markdown documents into the shared documents table."""
