"""xcodebuild and llvm-cov command construction and execution."""
