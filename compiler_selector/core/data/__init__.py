"""Static tables: priority lists, GNU version ranges, failure messages."""
