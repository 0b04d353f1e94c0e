"""huntclient: team and admin client for the Vault of the Multiverse scavenger hunt."""
