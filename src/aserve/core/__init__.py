"""aserve core library: everything below the CLI."""
