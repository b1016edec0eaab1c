from .github_storage import GitHubStorageClient, GitHubStorageConfig, StorageDeleteResult
