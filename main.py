"""Main entry point for the Synaptic RAG command line."""

from synaptic_rag.cli import main


if __name__ == "__main__":
    main()
