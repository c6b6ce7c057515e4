"""Binary layer: pointer cursors, records, reader, writer and inspection."""
